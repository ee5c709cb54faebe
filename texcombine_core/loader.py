"""
Sprite loading for TexCombine.
Decodes every PNG in a folder in parallel; unreadable files are skipped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from PIL import Image

from .sprite import Sprite


IMAGE_EXTENSIONS = {'.png'}

logger = logging.getLogger(__name__)


def find_sprite_files(folder: Path) -> List[Path]:
    """
    List sprite image files in the top level of a folder.

    Args:
        folder: Folder to scan

    Returns:
        Image paths sorted by name, at most one per file stem
    """
    files = sorted(p for p in folder.iterdir()
                   if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)

    unique = {}
    for file_path in files:
        if file_path.stem in unique:
            logger.warning(f"Skipping {file_path.name}: sprite name '{file_path.stem}' already taken by "
                           f"{unique[file_path.stem].name}")
            continue
        unique[file_path.stem] = file_path

    return list(unique.values())


def load_sprite(file_path: Path) -> Sprite:
    """Decode one image into an RGBA sprite named after the file stem."""
    logger.info(f"Load image {file_path}")
    with Image.open(file_path) as img:
        rgba = img.convert('RGBA')
    rgba.load()
    return Sprite(file_path.stem, rgba.width, rgba.height, image=rgba, source=file_path)


def load_sprites(folder: Path, workers: Optional[int] = None) -> List[Sprite]:
    """
    Load every sprite in a folder.

    Args:
        folder: Folder containing the sprite images
        workers: Maximum number of loader threads (executor default if None)

    Returns:
        Loaded sprites sorted by name
    """
    folder = Path(folder)
    files = find_sprite_files(folder)
    logger.info(f"Found {len(files)} sprite files in {folder}")
    return load_files(files, workers)


def load_files(files: List[Path], workers: Optional[int] = None) -> List[Sprite]:
    """
    Load sprite files, one worker task per file.

    Waits for all files before returning. A file that cannot be decoded is
    logged and left out instead of failing the batch.

    Args:
        files: Image paths; their stems must be unique
        workers: Maximum number of loader threads (executor default if None)

    Returns:
        Loaded sprites sorted by name
    """
    sprites = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {file_path: executor.submit(load_sprite, file_path) for file_path in files}
        for file_path, future in futures.items():
            try:
                sprites.append(future.result())
            except Exception as e:
                logger.warning(f"Error loading image {file_path}: {e}")

    if len(sprites) < len(files):
        logger.warning(f"Loaded {len(sprites)}/{len(files)} sprites")

    return sorted(sprites, key=lambda s: s.name)
