"""
Rendering engine for TexCombine.
Composites placed sprites onto the atlas canvas and writes the atlas
image together with its placement manifest.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Tuple

from PIL import Image, ImageDraw

from .packer import AtlasOverflowError
from .sprite import Atlas


class ManifestFormat(Enum):
    """Supported placement manifest formats."""
    LUA = "lua"
    JSON = "json"


def format_lua_manifest(atlas: Atlas, name: str) -> str:
    """
    Render the manifest as Lua loader calls.

    Args:
        atlas: Packed atlas
        name: Atlas name; the image is expected at <name>.png

    Returns:
        One LoadTexture header line, then one LoadImage line per placement
    """
    lines = [f'LoadTexture("{name}", "{name}.png");']
    for sprite_name, x, y, width, height in atlas.records():
        lines.append(f'LoadImage("{sprite_name}", "{name}", {x}, {y}, {width}, {height});')
    return "\n".join(lines) + "\n"


def format_json_manifest(atlas: Atlas, name: str) -> str:
    """Render the manifest as a JSON document."""
    manifest = {
        "texture": {"name": name, "image": f"{name}.png", "size": atlas.size},
        "sprites": [
            {"name": sprite_name, "atlas": name, "x": x, "y": y, "width": width, "height": height}
            for sprite_name, x, y, width, height in atlas.records()
        ],
    }
    return json.dumps(manifest, indent=2) + "\n"


MANIFEST_FORMATTERS = {
    ManifestFormat.LUA: format_lua_manifest,
    ManifestFormat.JSON: format_json_manifest,
}


class AtlasRenderer:
    """Handles atlas compositing and output for TexCombine."""

    def __init__(self):
        """Initialize the renderer."""
        self.logger = logging.getLogger(__name__)

    def compose(self, atlas: Atlas) -> Image.Image:
        """
        Draw every placed sprite onto a transparent canvas.

        Sprites are drawn one after another on the calling thread; each
        paste overwrites the canvas pixels, alpha included.

        Args:
            atlas: Packed atlas whose sprites carry their pixel data

        Returns:
            RGBA canvas of atlas.size x atlas.size

        Raises:
            AtlasOverflowError: If a placement lies outside the canvas
        """
        self.logger.info(f"Create texture in size {atlas.size}x{atlas.size}")
        canvas = Image.new('RGBA', (atlas.size, atlas.size), (0, 0, 0, 0))

        for placement in atlas.placements:
            if not placement.rect.fits_in(atlas.size):
                raise AtlasOverflowError(
                    f"Sprite {placement.name} at ({placement.x}, {placement.y}) lies outside "
                    f"the {atlas.size}x{atlas.size} canvas")

            image = placement.sprite.image
            if image is None:
                self.logger.warning(f"Sprite {placement.name} has no pixel data, leaving its area empty")
                continue

            if image.mode != 'RGBA':
                image = image.convert('RGBA')
            canvas.paste(image, (placement.x, placement.y))

        return canvas

    def generate_preview(self, atlas: Atlas, output_path: Path, max_dimension: int = 1024) -> Path:
        """
        Save a scaled-down atlas image with sprite outlines.

        Args:
            atlas: Packed atlas
            output_path: Output path for the preview PNG
            max_dimension: Maximum pixel dimension for preview (default 1024)

        Returns:
            Path of the written preview
        """
        canvas = self.compose(atlas)

        if atlas.size > max_dimension:
            scale_factor = max_dimension / atlas.size
            preview_size = max(1, int(atlas.size * scale_factor))
            canvas = canvas.resize((preview_size, preview_size), Image.Resampling.LANCZOS)
        else:
            scale_factor = 1.0

        self.logger.info(f"Preview scale factor: {scale_factor:.3f}")

        draw = ImageDraw.Draw(canvas)
        for placement in atlas.placements:
            left = int(placement.x * scale_factor)
            top = int(placement.y * scale_factor)
            right = max(left, int(placement.rect.right * scale_factor) - 1)
            bottom = max(top, int(placement.rect.bottom * scale_factor) - 1)
            draw.rectangle([left, top, right, bottom], outline=(255, 0, 0, 255), width=1)

        output_path = Path(output_path)
        canvas.save(output_path, format='PNG')
        self.logger.info(f"Preview saved: {output_path}")
        return output_path

    def emit(self, atlas: Atlas, name: str, output_dir: Path,
             manifest_format: ManifestFormat = ManifestFormat.LUA) -> Tuple[Path, Path]:
        """
        Write the atlas image and its manifest.

        Both files are written concurrently and both must succeed.

        Args:
            atlas: Packed atlas
            name: Atlas name used for both file names
            output_dir: Directory receiving the files
            manifest_format: Manifest syntax

        Returns:
            (image path, manifest path)
        """
        manifest_format = ManifestFormat(manifest_format)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        image_path = output_dir / f"{name}.png"
        manifest_path = output_dir / f"{name}.{manifest_format.value}"

        canvas = self.compose(atlas)
        manifest = MANIFEST_FORMATTERS[manifest_format](atlas, name)

        self.logger.info(f"Save texture to {image_path}")
        self.logger.info(f"Save code to {manifest_path}")
        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = [
                executor.submit(canvas.save, image_path, format='PNG'),
                executor.submit(manifest_path.write_text, manifest, encoding='utf-8'),
            ]
            for future in futures:
                future.result()

        return image_path, manifest_path
