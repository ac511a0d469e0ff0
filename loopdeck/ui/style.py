"""
Style System

Colors and the deck's flat theme (no cascading, no selectors).

Design principles:
- Colors are RGBA tuples of floats in 0.0-1.0
- Hex strings are parsed once at construction, never per frame
- Theme is a plain dataclass of named values
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Optional


# =============================================================================
# Color
# =============================================================================

# Color can be:
# - Tuple of 3-4 floats (RGB or RGBA, 0.0-1.0)
# - None (transparent)
Color = Optional[Tuple[float, ...]]


def color_rgba(c: Color) -> Tuple[float, float, float, float]:
    """Normalize color to RGBA tuple."""
    if c is None:
        return (0.0, 0.0, 0.0, 0.0)
    if len(c) == 3:
        return (c[0], c[1], c[2], 1.0)
    return (c[0], c[1], c[2], c[3])


def hex_to_color(hex_str: str) -> Tuple[float, float, float, float]:
    """Convert hex string to color. Supports #RGB, #RGBA, #RRGGBB, #RRGGBBAA."""
    h = hex_str.lstrip('#')
    try:
        if len(h) == 3:
            r, g, b = int(h[0], 16) / 15, int(h[1], 16) / 15, int(h[2], 16) / 15
            return (r, g, b, 1.0)
        elif len(h) == 4:
            r, g, b, a = int(h[0], 16) / 15, int(h[1], 16) / 15, int(h[2], 16) / 15, int(h[3], 16) / 15
            return (r, g, b, a)
        elif len(h) == 6:
            r, g, b = int(h[0:2], 16) / 255, int(h[2:4], 16) / 255, int(h[4:6], 16) / 255
            return (r, g, b, 1.0)
        elif len(h) == 8:
            r, g, b, a = int(h[0:2], 16) / 255, int(h[2:4], 16) / 255, int(h[4:6], 16) / 255, int(h[6:8], 16) / 255
            return (r, g, b, a)
    except ValueError:
        pass
    raise ValueError(f"Invalid hex color: {hex_str}")


def rgb255(r: float, g: float, b: float, a: float = 255.0) -> Tuple[float, float, float, float]:
    """Color from 0-255 channel values."""
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def boost_blue(c: Color, amount: float) -> Tuple[float, float, float, float]:
    """Add amount (0-1 scale) to the blue channel, clamped."""
    r, g, b, a = color_rgba(c)
    return (r, g, min(1.0, b + amount), a)


# =============================================================================
# Theme
# =============================================================================

@dataclass
class Theme:
    """Named colors and sizes used by the section views."""

    background: Color = rgb255(18, 18, 18)
    text: Color = rgb255(220, 220, 220)
    title: Color = (1.0, 1.0, 1.0, 1.0)
    equalizer_bar: Color = rgb255(255, 240, 180)
    active_glow: Color = rgb255(255, 220, 120, 160)

    corner_radius: float = 12.0
    bar_radius: float = 4.0
    glow_width: float = 3.0
    title_size: float = 14.0
    help_size: float = 12.0

    # Brightness added to the panel's blue channel at full pulse (0-255 scale)
    pulse_boost: float = 80.0


DEFAULT_THEME = Theme()
