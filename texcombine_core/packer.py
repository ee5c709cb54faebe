"""
Packing algorithms for TexCombine.
Finds the smallest square power-of-two canvas for a set of sprites and
assigns each sprite its position inside it.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .sprite import Atlas, Placement, Rectangle, Sprite


MAX_ATLAS_SIZE = 16384


class PackingMode(Enum):
    """How final placements are produced once the size is known."""
    UNIFIED = "unified"  # Placements come from the feasibility search itself
    LEGACY = "legacy"    # Separate row/shelf placer, as the original tool did


class PackingError(ValueError):
    """Base class for packing failures."""


class AtlasSizeError(PackingError):
    """No power-of-two size up to the configured maximum can hold the sprites."""


class AtlasOverflowError(PackingError):
    """A placement falls outside the atlas canvas."""


@dataclass
class AtlasSpec:
    """Atlas packing configuration."""
    margin: int = 2  # Padding around every sprite, in pixels
    mode: PackingMode = PackingMode.UNIFIED
    max_size: int = MAX_ATLAS_SIZE  # Largest canvas side the estimator may try

    def __post_init__(self):
        """Validate margin and size cap, accept the mode by name."""
        if isinstance(self.mode, str):
            self.mode = PackingMode(self.mode.lower())
        if self.margin < 0:
            raise ValueError(f"Margin must be non-negative, got {self.margin}")
        if not is_power_of_two(self.max_size):
            raise ValueError(f"Maximum atlas size must be a power of two, got {self.max_size}")


def is_power_of_two(value: int) -> bool:
    return value >= 1 and value & (value - 1) == 0


def sort_sprites(sprites: Iterable[Sprite]) -> List[Sprite]:
    """Order sprites tallest first; equal heights are ordered by name."""
    return sorted(sprites, key=lambda s: (-s.height, s.name))


def total_area(sprites: Iterable[Sprite], margin: int) -> int:
    """Sum of the margin-expanded areas, the lower bound for the canvas area."""
    area = 0
    for sprite in sprites:
        width, height = sprite.expanded_size(margin)
        area += width * height
    return area


class AtlasPacker:
    """Square power-of-two atlas packing engine."""

    def __init__(self, spec: Optional[AtlasSpec] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize packer with its configuration.

        Args:
            spec: Packing configuration (margin, mode, size cap)
            logger: Logger receiving progress messages; defaults to the module logger
        """
        self.spec = spec or AtlasSpec()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def margin(self) -> int:
        return self.spec.margin

    def pack(self, sprites: Iterable[Sprite]) -> Atlas:
        """
        Size the atlas and place every sprite.

        Args:
            sprites: Sprites to pack, in any order

        Returns:
            Atlas with its size and one placement per sprite, in packing order

        Raises:
            ValueError: If two sprites share a name
            AtlasSizeError: If the sprites do not fit within the maximum size
            AtlasOverflowError: If the shelf placer runs past the canvas (legacy mode)
        """
        ordered = sort_sprites(sprites)
        self._check_unique_names(ordered)
        self.logger.info(f"Packing {len(ordered)} sprites with margin {self.margin} ({self.spec.mode.value} mode)")

        size, rects = self._search(ordered)

        if self.spec.mode == PackingMode.LEGACY:
            placements = self.place_shelves(ordered, size)
        else:
            placements = [Placement(sprite, rect.x + self.margin, rect.y + self.margin)
                          for sprite, rect in zip(ordered, rects)]

        atlas = Atlas(size=size, margin=self.margin, placements=placements)
        self.logger.info(f"Atlas {size}x{size}: {atlas.sprite_count} sprites, "
                         f"efficiency={atlas.efficiency() * 100:.1f}%")
        return atlas

    def estimate(self, sprites: Iterable[Sprite]) -> int:
        """
        Find the smallest power-of-two side that passes the feasibility check.

        Args:
            sprites: Sprites to size the atlas for, in any order

        Returns:
            Canvas side length in pixels
        """
        size, _ = self._search(sort_sprites(sprites))
        return size

    def try_fill(self, sprites: List[Sprite], size: int, total: Optional[int] = None) -> Optional[List[Rectangle]]:
        """
        Check whether the sprites can be packed into a size x size canvas.

        Each sprite, in the given order, takes the first position in
        row-major order where its margin-expanded box overlaps no box
        accepted before it.

        Args:
            sprites: Sprites in packing order
            size: Canvas side length to test
            total: Precomputed expanded area of all sprites

        Returns:
            Accepted margin-expanded boxes, one per sprite, or None if they do not fit
        """
        if not sprites:
            return []

        if total is None:
            total = total_area(sprites, self.margin)
        if size * size < total:
            return None

        boxes = [sprite.expanded_size(self.margin) for sprite in sprites]
        if max(width for width, _ in boxes) > size or max(height for _, height in boxes) > size:
            return None

        accepted: List[Rectangle] = []
        for sprite, (width, height) in zip(sprites, boxes):
            rect = self._first_fit(accepted, width, height, size)
            if rect is None:
                self.logger.debug(f"No room for {sprite.name} in {size}x{size}")
                return None
            accepted.append(rect)

        return accepted

    def place_shelves(self, sprites: List[Sprite], size: int) -> List[Placement]:
        """
        Place sprites left to right in rows, starting a new row when one is full.

        Rows advance by the tallest sprite height of the previous row,
        without its margins, as the original tool did.

        Args:
            sprites: Sprites in packing order
            size: Canvas side length

        Returns:
            Placements in the same order as the sprites

        Raises:
            AtlasOverflowError: If a sprite ends up outside the canvas
        """
        x = 0
        y = 0
        row_height = 0
        placements = []

        for sprite in sprites:
            width, _ = sprite.expanded_size(self.margin)
            if x + width > size:
                x = 0
                y += row_height
                row_height = 0

            placement = Placement(sprite, x + self.margin, y + self.margin)
            if not placement.rect.fits_in(size):
                raise AtlasOverflowError(
                    f"Sprite {sprite.name} at ({placement.x}, {placement.y}) overflows the {size}x{size} atlas")

            placements.append(placement)
            row_height = max(row_height, sprite.height)
            x += width

        return placements

    def _search(self, sprites: List[Sprite]) -> Tuple[int, List[Rectangle]]:
        """Double the canvas side from 1 until the sprites fit."""
        total = total_area(sprites, self.margin)
        size = 1
        while size <= self.spec.max_size:
            self.logger.debug(f"Trying to fill {len(sprites)} sprites in {size}x{size}")
            rects = self.try_fill(sprites, size, total)
            if rects is not None:
                return size, rects
            size *= 2

        raise AtlasSizeError(
            f"{len(sprites)} sprites with margin {self.margin} do not fit in "
            f"{self.spec.max_size}x{self.spec.max_size}")

    def _first_fit(self, accepted: List[Rectangle], width: int, height: int, size: int) -> Optional[Rectangle]:
        """First free row-major position for a width x height box, or None."""
        for y in range(size - height + 1):
            row = [r for r in accepted if r.y < y + height and y < r.bottom]
            x = 0
            while x <= size - width:
                blocker = next((r for r in row if r.x < x + width and x < r.right), None)
                if blocker is None:
                    return Rectangle(x, y, width, height)
                # Every x before the blocker's right edge hits it as well
                x = blocker.right
        return None

    def _check_unique_names(self, sprites: List[Sprite]):
        duplicates = sorted(name for name, count in Counter(s.name for s in sprites).items() if count > 1)
        if duplicates:
            raise ValueError(f"Duplicate sprite names: {', '.join(duplicates)}")
