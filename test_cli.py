#!/usr/bin/env python3
"""End-to-end tests for the texcombine command line."""

import sys
import os
sys.path.insert(0, os.path.dirname(__file__))

import pytest
from PIL import Image

from texcombine_core.cli import main


@pytest.fixture
def sprite_folder(tmp_path):
    folder = tmp_path / "items"
    folder.mkdir()
    Image.new('RGBA', (10, 10), (255, 0, 0, 255)).save(folder / "coin.png")
    Image.new('RGBA', (20, 20), (0, 255, 0, 255)).save(folder / "chest.png")
    Image.new('RGBA', (5, 5), (0, 0, 255, 255)).save(folder / "gem.png")
    return folder


def test_builds_atlas_manifest_preview_and_report(sprite_folder, tmp_path):
    out = tmp_path / "out"
    status = main([str(sprite_folder), "--output-dir", str(out), "--preview", "--report"])

    assert status == 0
    with Image.open(out / "items.png") as img:
        assert img.size == (64, 64)
    assert (out / "items_preview.png").exists()

    manifest = (out / "items.lua").read_text(encoding='utf-8').splitlines()
    assert manifest[0] == 'LoadTexture("items", "items.png");'
    assert manifest[1] == 'LoadImage("chest", "items", 2, 2, 20, 20);'
    assert len(manifest) == 4

    reports = list(out.glob("items_*.log"))
    assert len(reports) == 1
    assert "Final Status: SUCCESS" in reports[0].read_text(encoding='utf-8')


def test_broken_sprite_does_not_fail_the_build(sprite_folder, tmp_path):
    (sprite_folder / "corrupt.png").write_bytes(b"\x89PNG broken")
    status = main([str(sprite_folder), "--output-dir", str(tmp_path), "--name", "loot",
                   "--format", "json", "--mode", "legacy", "--report"])

    assert status == 0
    text = (tmp_path / "loot.json").read_text(encoding='utf-8')
    assert "corrupt" not in text
    assert "Final Status: PARTIAL" in next(tmp_path.glob("loot_*.log")).read_text(encoding='utf-8')


def test_missing_folder_fails(tmp_path):
    assert main([str(tmp_path / "nowhere")]) == 1


def test_atlas_larger_than_max_size_fails(sprite_folder, tmp_path):
    status = main([str(sprite_folder), "--output-dir", str(tmp_path), "--max-size", "32", "--report"])

    assert status == 1
    assert not (tmp_path / "items.png").exists()
    report = next(tmp_path.glob("items_*.log")).read_text(encoding='utf-8')
    assert "Final Status: FAILED" in report


def test_invalid_margin_is_a_usage_error(sprite_folder):
    with pytest.raises(SystemExit) as excinfo:
        main([str(sprite_folder), "--margin", "-1"])
    assert excinfo.value.code == 2
