"""
Sprite and atlas data structures for TexCombine.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class Sprite:
    """A single source image with its identity and dimensions.

    The pixel payload is opaque to the packer; it is only forwarded to
    the compositor.
    """

    name: str
    width: int
    height: int
    image: Any = field(default=None, compare=False, repr=False)
    source: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self):
        """Reject empty names and non-positive dimensions."""
        if not self.name:
            raise ValueError("Sprite name must not be empty")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Sprite {self.name} has invalid size {self.width}x{self.height}")
        if isinstance(self.source, str):
            object.__setattr__(self, 'source', Path(self.source))

    def expanded_size(self, margin: int) -> Tuple[int, int]:
        """Width and height including the margin on both sides."""
        return self.width + margin * 2, self.height + margin * 2


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle; right and bottom edges are exclusive."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def intersects(self, other: 'Rectangle') -> bool:
        """Check overlap; rectangles sharing only an edge do not intersect."""
        return not (
            self.right <= other.x or
            self.bottom <= other.y or
            self.x >= other.right or
            self.y >= other.bottom
        )

    def fits_in(self, size: int) -> bool:
        return self.x >= 0 and self.y >= 0 and self.right <= size and self.bottom <= size


@dataclass(frozen=True)
class Placement:
    """Final position of a sprite's pixels inside the atlas."""

    sprite: Sprite
    x: int
    y: int

    @property
    def name(self) -> str:
        return self.sprite.name

    @property
    def width(self) -> int:
        return self.sprite.width

    @property
    def height(self) -> int:
        return self.sprite.height

    @property
    def rect(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.width, self.height)

    def expanded(self, margin: int) -> Rectangle:
        """Bounding box grown by the margin on every side."""
        return Rectangle(self.x - margin, self.y - margin,
                         self.width + margin * 2, self.height + margin * 2)


@dataclass
class Atlas:
    """Result of packing: a square power-of-two canvas and its placements."""

    size: int
    margin: int
    placements: List[Placement] = field(default_factory=list)

    @property
    def sprite_count(self) -> int:
        return len(self.placements)

    def records(self) -> List[Tuple[str, int, int, int, int]]:
        """(name, x, y, width, height) per placement, in placement order."""
        return [(p.name, p.x, p.y, p.width, p.height) for p in self.placements]

    def efficiency(self) -> float:
        """Fraction of the canvas covered by sprite pixels."""
        used = sum(p.width * p.height for p in self.placements)
        return used / (self.size * self.size)
