"""
Layout primitives.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Rectangle with position and size."""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    def contains_interior(self, px: float, py: float) -> bool:
        """Strict test: points on any edge are outside."""
        return self.x < px < (self.x + self.w) and self.y < py < (self.y + self.h)

    def intersects(self, other: Rect) -> bool:
        return not (
            other.x >= self.right or
            other.right <= self.x or
            other.y >= self.bottom or
            other.bottom <= self.y
        )

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h
