"""
Logging system for TexCombine.
Handles console logging setup and the per-build report file.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


def setup_logging(log_level: int = logging.INFO) -> None:
    """Setup basic logging configuration."""
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def log_build(log_path: Path, atlas_name: str, timestamp: datetime,
              input_folder: Path, margin: int, mode: str, sprites_found: int,
              sprites_placed: int, atlas_size: int, efficiency: float,
              process_time: float, image_path: Optional[Path] = None,
              manifest_path: Optional[Path] = None, error: Optional[str] = None) -> None:
    """
    Write the report of one atlas build to file.

    Args:
        log_path: Path to report file
        atlas_name: Name of the atlas
        timestamp: Build start time
        input_folder: Folder the sprites were loaded from
        margin: Margin around each sprite in pixels
        mode: Packing mode name
        sprites_found: Number of sprite files found
        sprites_placed: Number of sprites placed in the atlas
        atlas_size: Atlas side length in pixels (0 if packing failed)
        efficiency: Fraction of the atlas covered by sprite pixels
        process_time: Build time in seconds
        image_path: Written atlas image, if any
        manifest_path: Written manifest, if any
        error: Error message if the build failed
    """

    log_content = f"""TexCombine - Build Report
{'=' * 50}

Atlas Information:
    Atlas Name: {atlas_name}
    Timestamp: {timestamp.strftime('%Y-%m-%d %H:%M:%S')}

Input Parameters:
    Input Folder: {input_folder}
    Margin: {margin} pixels
    Packing Mode: {mode}
    Sprite Files: {sprites_found}
    Sprites Placed: {sprites_placed}

Output Information:
    Atlas Size: {atlas_size} x {atlas_size} pixels
    Efficiency: {efficiency * 100:.1f}%
    Image: {image_path.name if image_path else '-'}
    Manifest: {manifest_path.name if manifest_path else '-'}

Process Information:
    Processing Time: {process_time:.2f} seconds
    Completion Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

"""

    if error:
        log_content += f"""Error Information:
    Error: {error}
    Status: FAILED

"""

    if error:
        status = "FAILED"
    elif sprites_placed < sprites_found:
        status = "PARTIAL"
    else:
        status = "SUCCESS"

    log_content += f"""Summary:
    Atlas: {atlas_name}
    Sprites Packed: {sprites_placed}/{sprites_found}
    Final Status: {status}
"""

    try:
        with open(log_path, 'w', encoding='utf-8') as f:
            f.write(log_content)
    except OSError as e:
        logger = logging.getLogger(__name__)
        logger.error(f"Failed to write build report {log_path}: {e}")


def generate_report_filename(atlas_name: str) -> str:
    """
    Generate standardized report filename.

    Args:
        atlas_name: Name of the atlas

    Returns:
        Formatted report filename
    """
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{atlas_name}_{timestamp}.log"
