"""
Deck configuration.

Static, construction-time settings for the deck and for each section.
Both dataclasses validate themselves in __post_init__ and raise
ConfigError on bad values.
"""

from __future__ import annotations
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Dict, Tuple
import json
import logging
import os

from .ui.layout import Rect
from .ui.style import hex_to_color

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid deck or section configuration."""


# =============================================================================
# Section descriptor
# =============================================================================

@dataclass(frozen=True)
class SectionConfig:
    """Immutable descriptor for one section."""
    id: str
    name: str
    genre: str
    x: float
    y: float
    w: float
    h: float
    base_color: str
    active_color: str
    sound: str  # Path to the loop, relative to DeckConfig.asset_root

    def __post_init__(self):
        if not self.id:
            raise ConfigError("Section id must be a non-empty string")
        if self.w <= 0 or self.h <= 0:
            raise ConfigError(f"Section '{self.id}' needs a positive size, got {self.w}x{self.h}")
        for attr in ("base_color", "active_color"):
            try:
                hex_to_color(getattr(self, attr))
            except ValueError as e:
                raise ConfigError(f"Section '{self.id}' {attr}: {e}") from e

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)

    @property
    def base_rgba(self) -> Tuple[float, float, float, float]:
        return hex_to_color(self.base_color)

    @property
    def active_rgba(self) -> Tuple[float, float, float, float]:
        return hex_to_color(self.active_color)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SectionConfig:
        return cls(**_checked_kwargs(cls, data, "section"))


DEFAULT_SECTIONS: Tuple[SectionConfig, ...] = (
    SectionConfig(
        id="jazz1", name="Sax Corner", genre="Jazz",
        x=60, y=80, w=260, h=160,
        base_color="#2b3a67", active_color="#3f64a0",
        sound="assets/audio/jazz_loop.mp3",
    ),
    SectionConfig(
        id="rock1", name="Amp Row", genre="Rock",
        x=360, y=80, w=260, h=160,
        base_color="#4b2e2e", active_color="#7a3f3f",
        sound="assets/audio/rock_loop.mp3",
    ),
    SectionConfig(
        id="edm1", name="Synth Table", genre="EDM",
        x=660, y=80, w=260, h=160,
        base_color="#1c3b2a", active_color="#2e7a59",
        sound="assets/audio/edm_loop.mp3",
    ),
)


# =============================================================================
# Deck config
# =============================================================================

@dataclass
class DeckConfig:
    width: int = 960
    height: int = 540
    title: str = "Loop Deck"

    # Audio
    sample_rate: int = 44100
    block_size: int = 512
    master_gain: float = 0.9
    mute_ramp_seconds: float = 0.3
    fade_seconds: float = 0.4

    # Analysis
    smoothing: float = 0.2
    fft_bins: int = 32
    fft_smoothing: float = 0.8
    equalizer_bins: int = 16

    asset_root: str = "."
    sections: Tuple[SectionConfig, ...] = field(default_factory=lambda: DEFAULT_SECTIONS)

    def __post_init__(self):
        self.sections = tuple(self.sections)

        if not 0.0 < self.master_gain <= 1.0:
            raise ConfigError(f"master_gain must be in (0, 1], got {self.master_gain}")
        if not 0.0 < self.smoothing <= 1.0:
            raise ConfigError(f"smoothing must be in (0, 1], got {self.smoothing}")
        if self.mute_ramp_seconds < 0 or self.fade_seconds < 0:
            raise ConfigError("Ramp durations must be >= 0")
        if self.equalizer_bins > self.fft_bins:
            raise ConfigError(
                f"equalizer_bins ({self.equalizer_bins}) cannot exceed fft_bins ({self.fft_bins})"
            )

        seen = set()
        for section in self.sections:
            if section.id in seen:
                raise ConfigError(f"Duplicate section id '{section.id}'")
            seen.add(section.id)

        for i, a in enumerate(self.sections):
            for b in self.sections[i + 1:]:
                if a.rect.intersects(b.rect):
                    logger.warning("Sections '%s' and '%s' overlap; '%s' wins hit tests",
                                   a.id, b.id, a.id)

    def sound_path(self, section: SectionConfig) -> str:
        """Resolve a section's sound path against asset_root."""
        if os.path.isabs(section.sound):
            return section.sound
        return os.path.join(self.asset_root, section.sound)


def load_config(path: str) -> DeckConfig:
    """
    Read a DeckConfig from a JSON file.

    asset_root defaults to the directory holding the file.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config '{path}' must hold a JSON object")

    kwargs = _checked_kwargs(DeckConfig, data, "deck")
    if "sections" in kwargs:
        kwargs["sections"] = tuple(SectionConfig.from_dict(s) for s in kwargs["sections"])
    kwargs.setdefault("asset_root", os.path.dirname(os.path.abspath(path)))

    config = DeckConfig(**kwargs)
    logger.info("Loaded config '%s' (%d sections)", path, len(config.sections))
    return config


def _checked_kwargs(cls, data: Dict[str, Any], what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigError(f"Each {what} entry must be a JSON object")
    allowed = {f.name for f in fields(cls)}
    unknown = set(data) - allowed
    if unknown:
        raise ConfigError(f"Unknown {what} keys: {', '.join(sorted(unknown))}")
    required = {
        f.name for f in fields(cls)
        if f.default is MISSING and f.default_factory is MISSING
    }
    missing = required - set(data)
    if missing:
        raise ConfigError(f"Missing {what} keys: {', '.join(sorted(missing))}")
    return dict(data)
