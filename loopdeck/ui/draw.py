"""
Draw Context

Batched 2D drawing for the deck views.

Design:
- Collects draw calls during the view draw phase
- Commands carry a z-index in call order
- Renderer consumes the finalized DrawBatch

Primitives:
- Filled rectangles (with optional corner radius)
- Filled ellipses
- Rectangle outlines (one stroked quad, corners follow the radius)
- Text (collected; rasterizing needs a font atlas)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple

from .layout import Rect
from .style import Color, color_rgba

SHAPE_RECT = 0
SHAPE_ELLIPSE = 1


# =============================================================================
# Draw Commands (internal representation)
# =============================================================================

@dataclass
class DrawQuad:
    """A single quad to draw."""
    x: float
    y: float
    w: float
    h: float
    color: Tuple[float, float, float, float]
    radius: float = 0.0  # Corner radius (ignored for ellipses)
    shape: int = SHAPE_RECT
    stroke: float = 0.0  # Outline width; 0 fills the shape
    z_index: int = 0


@dataclass
class DrawText:
    """Text to draw."""
    text: str
    x: float
    y: float
    color: Tuple[float, float, float, float]
    font_size: float = 14.0
    align: str = "left"  # left, center, right
    z_index: int = 0


# =============================================================================
# Draw Batch
# =============================================================================

@dataclass
class DrawBatch:
    """
    Collection of draw commands.

    After building, call finalize() to sort by z-index.
    """
    quads: List[DrawQuad] = field(default_factory=list)
    texts: List[DrawText] = field(default_factory=list)

    def finalize(self):
        self.quads.sort(key=lambda q: q.z_index)
        self.texts.sort(key=lambda t: t.z_index)

    def clear(self):
        self.quads.clear()
        self.texts.clear()

    @property
    def quad_count(self) -> int:
        return len(self.quads)


# =============================================================================
# Draw Context
# =============================================================================

class DrawContext:
    """
    Context for drawing one frame.

    Maintains a translation stack so views can draw in local coordinates.
    """

    def __init__(self, window_width: int, window_height: int):
        self.window_width = window_width
        self.window_height = window_height

        self.batch = DrawBatch()

        self._offset_x = 0.0
        self._offset_y = 0.0
        self._offset_stack: List[Tuple[float, float]] = []

        self._z_index = 0

    # -------------------------------------------------------------------------
    # Transform Stack
    # -------------------------------------------------------------------------

    def push_offset(self, x: float, y: float):
        self._offset_stack.append((self._offset_x, self._offset_y))
        self._offset_x += x
        self._offset_y += y

    def pop_offset(self):
        if self._offset_stack:
            self._offset_x, self._offset_y = self._offset_stack.pop()

    def _transform(self, x: float, y: float) -> Tuple[float, float]:
        return (x + self._offset_x, y + self._offset_y)

    def _next_z(self) -> int:
        z = self._z_index
        self._z_index += 1
        return z

    # -------------------------------------------------------------------------
    # Drawing Primitives
    # -------------------------------------------------------------------------

    def draw_rect(self, rect: Rect, color: Color, radius: float = 0.0):
        """Draw a filled rectangle."""
        tx, ty = self._transform(rect.x, rect.y)
        self.batch.quads.append(DrawQuad(
            x=tx, y=ty, w=rect.w, h=rect.h,
            color=color_rgba(color),
            radius=min(radius, rect.w / 2, rect.h / 2),
            z_index=self._next_z(),
        ))

    def draw_ellipse(self, cx: float, cy: float, w: float, h: float, color: Color):
        """Draw a filled ellipse centered on (cx, cy)."""
        tx, ty = self._transform(cx - w / 2, cy - h / 2)
        self.batch.quads.append(DrawQuad(
            x=tx, y=ty, w=w, h=h,
            color=color_rgba(color),
            shape=SHAPE_ELLIPSE,
            z_index=self._next_z(),
        ))

    def draw_rect_outline(self, rect: Rect, color: Color, width: float = 1.0,
                          radius: float = 0.0):
        """Draw a rectangle outline centered on the rect's (optionally rounded) edges."""
        tx, ty = self._transform(rect.x, rect.y)
        half = width / 2
        # The stroke straddles the edge, so the quad grows by half the width
        self.batch.quads.append(DrawQuad(
            x=tx - half, y=ty - half, w=rect.w + width, h=rect.h + width,
            color=color_rgba(color),
            radius=min(radius, rect.w / 2, rect.h / 2) + half,
            stroke=width,
            z_index=self._next_z(),
        ))

    def draw_text(self, text: str, x: float, y: float, color: Color,
                  font_size: float = 14.0, align: str = "left"):
        tx, ty = self._transform(x, y)
        self.batch.texts.append(DrawText(
            text=text, x=tx, y=ty,
            color=color_rgba(color),
            font_size=font_size,
            align=align,
            z_index=self._next_z(),
        ))

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def finalize(self) -> DrawBatch:
        self.batch.finalize()
        return self.batch

    def clear(self):
        """Clear the context for next frame."""
        self.batch.clear()
        self._z_index = 0
        self._offset_x = 0.0
        self._offset_y = 0.0
        self._offset_stack.clear()
