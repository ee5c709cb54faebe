#!/usr/bin/env python3
"""Tests for atlas compositing and manifest output."""

import sys
import os
sys.path.insert(0, os.path.dirname(__file__))

import json

import pytest
from PIL import Image

from texcombine_core import AtlasPacker, AtlasSpec, AtlasRenderer, ManifestFormat
from texcombine_core.packer import AtlasOverflowError
from texcombine_core.renderer import format_lua_manifest
from texcombine_core.sprite import Atlas, Placement, Sprite


def solid_sprite(name, width, height, color):
    return Sprite(name, width, height, image=Image.new('RGBA', (width, height), color))


@pytest.fixture
def atlas():
    sprites = [
        solid_sprite("red", 10, 10, (255, 0, 0, 255)),
        solid_sprite("green", 20, 20, (0, 255, 0, 255)),
        solid_sprite("ghost", 5, 5, (10, 20, 30, 128)),
    ]
    return AtlasPacker(AtlasSpec(margin=2)).pack(sprites)


def test_compose_draws_each_sprite_at_its_placement(atlas):
    canvas = AtlasRenderer().compose(atlas)
    assert canvas.size == (64, 64)
    assert canvas.mode == 'RGBA'

    positions = {p.name: (p.x, p.y) for p in atlas.placements}
    assert canvas.getpixel(positions["green"]) == (0, 255, 0, 255)
    assert canvas.getpixel(positions["red"]) == (255, 0, 0, 255)
    # Pasted as-is, not blended with the transparent background
    assert canvas.getpixel(positions["ghost"]) == (10, 20, 30, 128)
    # Margins stay transparent
    assert canvas.getpixel((0, 0)) == (0, 0, 0, 0)
    assert canvas.getpixel((63, 63)) == (0, 0, 0, 0)


def test_compose_converts_non_rgba_sprites():
    sprite = Sprite("gray", 2, 2, image=Image.new('L', (2, 2), 200))
    atlas = Atlas(size=2, margin=0, placements=[Placement(sprite, 0, 0)])
    assert AtlasRenderer().compose(atlas).getpixel((1, 1)) == (200, 200, 200, 255)


def test_compose_rejects_placement_outside_canvas():
    sprite = solid_sprite("late", 3, 3, (1, 2, 3, 255))
    atlas = Atlas(size=4, margin=0, placements=[Placement(sprite, 2, 2)])
    with pytest.raises(AtlasOverflowError):
        AtlasRenderer().compose(atlas)


def test_compose_skips_sprites_without_pixels(caplog):
    atlas = Atlas(size=4, margin=0, placements=[Placement(Sprite("empty", 2, 2), 0, 0)])
    canvas = AtlasRenderer().compose(atlas)
    assert canvas.getpixel((0, 0)) == (0, 0, 0, 0)
    assert "empty has no pixel data" in caplog.text


def test_emit_writes_image_and_lua_manifest(atlas, tmp_path):
    image_path, manifest_path = AtlasRenderer().emit(atlas, "items", tmp_path / "out")

    assert image_path == tmp_path / "out" / "items.png"
    assert manifest_path == tmp_path / "out" / "items.lua"
    with Image.open(image_path) as img:
        assert img.size == (64, 64)

    lines = manifest_path.read_text(encoding='utf-8').splitlines()
    assert lines[0] == 'LoadTexture("items", "items.png");'
    assert lines[1:] == [
        'LoadImage("green", "items", 2, 2, 20, 20);',
        'LoadImage("red", "items", 26, 2, 10, 10);',
        'LoadImage("ghost", "items", 40, 2, 5, 5);',
    ]


def test_emit_writes_json_manifest(atlas, tmp_path):
    _, manifest_path = AtlasRenderer().emit(atlas, "items", tmp_path, ManifestFormat.JSON)
    assert manifest_path.suffix == ".json"

    manifest = json.loads(manifest_path.read_text(encoding='utf-8'))
    assert manifest["texture"] == {"name": "items", "image": "items.png", "size": 64}
    assert manifest["sprites"][0] == {"name": "green", "atlas": "items", "x": 2, "y": 2, "width": 20, "height": 20}
    assert len(manifest["sprites"]) == 3


def test_empty_atlas_manifest_has_only_header():
    atlas = AtlasPacker().pack([])
    assert format_lua_manifest(atlas, "none") == 'LoadTexture("none", "none.png");\n'


def test_preview_is_scaled_down(atlas, tmp_path):
    preview_path = AtlasRenderer().generate_preview(atlas, tmp_path / "preview.png", max_dimension=16)
    with Image.open(preview_path) as img:
        assert img.size == (16, 16)
