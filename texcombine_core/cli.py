"""
Command-line interface for TexCombine.
Packs a folder of sprite images into one texture atlas plus manifest.
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .loader import find_sprite_files, load_files
from .logger import generate_report_filename, log_build, setup_logging
from .packer import MAX_ATLAS_SIZE, AtlasPacker, AtlasSpec, PackingError, PackingMode
from .renderer import AtlasRenderer, ManifestFormat


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="texcombine",
        description="Pack a folder of PNG sprites into a square power-of-two texture atlas.",
    )
    parser.add_argument("input_folder", type=Path, help="Folder containing the sprite PNGs")
    parser.add_argument("--name", help="Atlas name (default: input folder name)")
    parser.add_argument("--output-dir", type=Path, default=Path("."),
                        help="Directory for the atlas image and manifest (default: current directory)")
    parser.add_argument("--margin", type=int, default=2, help="Padding around each sprite in pixels (default: 2)")
    parser.add_argument("--mode", choices=[m.value for m in PackingMode], default=PackingMode.UNIFIED.value,
                        help="Placement algorithm: unified first-fit or legacy shelf rows (default: unified)")
    parser.add_argument("--max-size", type=int, default=MAX_ATLAS_SIZE,
                        help=f"Largest atlas side to try, a power of two (default: {MAX_ATLAS_SIZE})")
    parser.add_argument("--format", dest="manifest_format", choices=[f.value for f in ManifestFormat],
                        default=ManifestFormat.LUA.value, help="Manifest format (default: lua)")
    parser.add_argument("--workers", type=int, help="Number of image loading threads")
    parser.add_argument("--preview", action="store_true", help="Also write <name>_preview.png with sprite outlines")
    parser.add_argument("--report", action="store_true", help="Write a build report log next to the outputs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every size tried")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for TexCombine."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    input_folder: Path = args.input_folder
    if not input_folder.is_dir():
        logger.error(f"Input folder {input_folder} not found")
        return 1

    try:
        spec = AtlasSpec(margin=args.margin, mode=args.mode, max_size=args.max_size)
    except ValueError as e:
        parser.error(str(e))

    name = args.name or input_folder.resolve().name
    start_time = datetime.now()

    files = find_sprite_files(input_folder)
    logger.info(f"Found {len(files)} sprite files in {input_folder}")
    sprites = load_files(files, args.workers)

    atlas = None
    image_path = manifest_path = None
    error = None
    try:
        atlas = AtlasPacker(spec).pack(sprites)
        renderer = AtlasRenderer()
        image_path, manifest_path = renderer.emit(atlas, name, args.output_dir, args.manifest_format)
        if args.preview:
            renderer.generate_preview(atlas, args.output_dir / f"{name}_preview.png")
    except (PackingError, ValueError, OSError) as e:
        logger.error(f"Failed to build atlas {name}: {e}")
        error = str(e)

    if args.report:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        report_path = args.output_dir / generate_report_filename(name)
        log_build(
            log_path=report_path,
            atlas_name=name,
            timestamp=start_time,
            input_folder=input_folder,
            margin=spec.margin,
            mode=spec.mode.value,
            sprites_found=len(files),
            sprites_placed=atlas.sprite_count if atlas else 0,
            atlas_size=atlas.size if atlas else 0,
            efficiency=atlas.efficiency() if atlas else 0.0,
            process_time=(datetime.now() - start_time).total_seconds(),
            image_path=image_path,
            manifest_path=manifest_path,
            error=error,
        )
        logger.info(f"Build report written to {report_path}")

    if error:
        return 1

    logger.info(f"Atlas {name} done: {atlas.sprite_count} sprites in {atlas.size}x{atlas.size}")
    return 0
