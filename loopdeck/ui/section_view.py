"""
Section views - Turn section snapshots and frame state into draw calls.
"""

from __future__ import annotations
from typing import Iterable, TYPE_CHECKING
import math

from ..core.mathutil import map_range
from .layout import Rect
from .style import DEFAULT_THEME, Theme, boost_blue, rgb255

if TYPE_CHECKING:
    from ..sections.section import SectionSnapshot
    from .draw import DrawContext

HELP_TEXT = "Click sections to toggle loops. Space: play/pause • R: reset • M: mute"

AMBIENT_LIGHTS = 6


class SectionView:
    """
    Draws one section panel in its local coordinates:
    pulse-tinted background, title, equalizer bars and the active glow.
    """

    def __init__(self, theme: Theme = DEFAULT_THEME):
        self.theme = theme

    def draw(self, ctx: DrawContext, snap: SectionSnapshot):
        t = self.theme
        g = snap.geometry
        local = Rect(0, 0, g.w, g.h)

        ctx.push_offset(g.x, g.y)

        bg = snap.active_color if snap.is_active else snap.base_color
        ctx.draw_rect(local, boost_blue(bg, snap.pulse * t.pulse_boost / 255.0),
                      radius=t.corner_radius)

        ctx.draw_text(f"{snap.name} — {snap.genre}", 10, 8, t.title,
                      font_size=t.title_size)

        for bar in self.bar_rects(snap):
            ctx.draw_rect(bar, t.equalizer_bar, radius=t.bar_radius)

        if snap.is_active:
            ctx.draw_rect_outline(local, t.active_glow, width=t.glow_width,
                                  radius=t.corner_radius)

        ctx.pop_offset()

    def bar_rects(self, snap: SectionSnapshot):
        """Equalizer bars in section-local coordinates, left to right."""
        g = snap.geometry
        count = len(snap.equalizer)
        if count == 0:
            return []
        bar_w = (g.w - 20) / count
        rects = []
        for i, value in enumerate(snap.equalizer):
            h = map_range(value, 0.0, 1.0, 4.0, g.h * 0.5)
            rects.append(Rect(10 + i * bar_w, g.h - 14 - h, max(0.0, bar_w - 2), h))
        return rects


def draw_ambient(ctx: DrawContext, frame_id: int, width: float, height: float):
    """Slowly breathing background lights along the bottom of the window."""
    for i in range(AMBIENT_LIGHTS):
        x = (i + 0.5) * (width / AMBIENT_LIGHTS)
        y = height * 0.85
        w = 180 + math.sin(frame_id * 0.01 + i) * 20
        ctx.draw_ellipse(x, y, w, 60, rgb255(40 + i * 5, 40, 60, 30))


def draw_help(ctx: DrawContext, height: float, theme: Theme = DEFAULT_THEME):
    ctx.draw_text(HELP_TEXT, 20, height - 24, theme.text, font_size=theme.help_size)


def draw_deck(
    ctx: DrawContext,
    snapshots: Iterable[SectionSnapshot],
    frame_id: int,
    view: SectionView = None,
):
    """Full frame: ambient lights, sections in registry order, help line."""
    view = view or SectionView()
    draw_ambient(ctx, frame_id, ctx.window_width, ctx.window_height)
    for snap in snapshots:
        view.draw(ctx, snap)
    draw_help(ctx, ctx.window_height, view.theme)
