"""
TexCombine Core Package
Core functionality for packing sprites into square power-of-two texture atlases.
"""

from .sprite import Sprite, Rectangle, Placement, Atlas
from .packer import (
    AtlasPacker,
    AtlasSpec,
    PackingMode,
    PackingError,
    AtlasSizeError,
    AtlasOverflowError,
)
from .loader import load_sprites
from .renderer import AtlasRenderer, ManifestFormat

__all__ = [
    'Sprite',
    'Rectangle',
    'Placement',
    'Atlas',
    'AtlasPacker',
    'AtlasSpec',
    'PackingMode',
    'PackingError',
    'AtlasSizeError',
    'AtlasOverflowError',
    'load_sprites',
    'AtlasRenderer',
    'ManifestFormat',
]
