"""
UI System

Flat styling and batched 2D drawing for the deck, rendered in GL.

Components:
- style: Colors and the deck theme
- layout: Rect
- draw: DrawContext / DrawBatch command collection
- renderer: moderngl renderer for DrawBatch
- section_view: Section panels, ambient lights, help line

Example usage:

    ctx = DrawContext(width, height)
    draw_deck(ctx, registry.snapshots(), frame.frame_id)
    renderer.render(ctx.finalize(), width, height)
"""

from .style import Color, Theme, DEFAULT_THEME, color_rgba, hex_to_color, rgb255
from .layout import Rect
from .draw import DrawContext, DrawBatch, DrawQuad, DrawText
from .renderer import DeckRenderer
from .section_view import SectionView, draw_ambient, draw_help, draw_deck, HELP_TEXT

__all__ = [
    # Style
    "Color", "Theme", "DEFAULT_THEME", "color_rgba", "hex_to_color", "rgb255",
    # Layout
    "Rect",
    # Draw
    "DrawContext", "DrawBatch", "DrawQuad", "DrawText",
    "DeckRenderer",
    # Views
    "SectionView", "draw_ambient", "draw_help", "draw_deck", "HELP_TEXT",
]
