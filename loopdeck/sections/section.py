"""
AudioSection - One loop's playback state machine plus its visual smoother.

States:
    INACTIVE --start()--> ACTIVE --stop()--> INACTIVE

start() and stop() are idempotent. stop() fades the section gain out
and halts the loop only when the fade completes; every effective
start()/stop() bumps a generation counter, and the fade-out completion
carries the generation it was issued under, so a completion that fires
after a newer start() is recognised as stale and ignored.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING
import logging
import numpy as np

from ..audio.analysis import AmplitudeTap, SpectrumTap
from ..audio.errors import EngineSuspended
from ..core.mathutil import clamp, lerp
from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_SECTION_STARTED, SIGNAL_SECTION_STOPPED, SIGNAL_SECTION_HALTED,
)

if TYPE_CHECKING:
    from ..audio.engine import AudioEngine
    from ..audio.handle import AudioHandle
    from ..config import SectionConfig
    from ..ui.layout import Rect

logger = logging.getLogger(__name__)

DEFAULT_FADE_SECONDS = 0.4
DEFAULT_SMOOTHING = 0.2
EQUALIZER_BINS = 16


@dataclass(frozen=True)
class SectionSnapshot:
    """What the renderer reads for one section, once per frame."""
    id: str
    name: str
    genre: str
    geometry: Rect
    base_color: Tuple[float, float, float, float]
    active_color: Tuple[float, float, float, float]
    is_active: bool
    pulse: float
    equalizer: Tuple[float, ...]


class AudioSection(SignalEmitter):
    """
    A clickable area bound to one looping AudioHandle.

    The handle is a reference only: the engine owns it and it outlives
    the section.

    Usage:
        section = AudioSection(config, handle, engine)
        section.toggle()      # fade in and start looping
        section.update()      # once per frame
        section.pulse, section.equalizer
    """

    def __init__(
        self,
        config: SectionConfig,
        source: AudioHandle,
        engine: AudioEngine,
        amplitude: Optional[AmplitudeTap] = None,
        spectrum: Optional[SpectrumTap] = None,
        fade_seconds: float = DEFAULT_FADE_SECONDS,
        smoothing: float = DEFAULT_SMOOTHING,
        equalizer_bins: int = EQUALIZER_BINS,
        signals: Optional[SignalBridge] = None,
    ):
        self.config = config
        self.source = source
        self._engine = engine

        self.amplitude = amplitude or AmplitudeTap()
        self.spectrum = spectrum or SpectrumTap()
        self.fade_seconds = fade_seconds
        self.smoothing = smoothing
        self.equalizer_bins = equalizer_bins

        # Own fade stage, silent until the first start()
        self.gain = engine.create_gain(0.0, name=config.id)
        engine.route(source, self.gain)

        self._geometry = config.rect
        self._base_color = config.base_rgba
        self._active_color = config.active_rgba

        self._active = False
        self._generation = 0
        self._pulse = 0.0
        self._equalizer: List[float] = [0.0] * equalizer_bins

        if signals is not None:
            self.bind_bridge(signals)

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def genre(self) -> str:
        return self.config.genre

    @property
    def geometry(self) -> Rect:
        return self._geometry

    @property
    def base_color(self) -> Tuple[float, float, float, float]:
        return self._base_color

    @property
    def active_color(self) -> Tuple[float, float, float, float]:
        return self._active_color

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pulse(self) -> float:
        return self._pulse

    @property
    def equalizer(self) -> List[float]:
        return list(self._equalizer)

    def contains(self, px: float, py: float) -> bool:
        return self._geometry.contains_interior(px, py)

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    def toggle(self):
        if self._active:
            self.stop()
        else:
            self.start()

    def start(self):
        try:
            self._engine.ensure_running()
        except EngineSuspended as e:
            logger.warning("Section '%s': %s; playing silently", self.id, e)

        if self._active:
            return

        self._active = True
        self._generation += 1

        if not self.source.is_playing():
            self.source.loop()

        if self.amplitude.input is not self.source:
            self.amplitude.set_input(self.source)
        if self.spectrum.input is not self.source:
            self.spectrum.set_input(self.source)

        # Ramps from wherever the gain is now, superseding a pending fade-out
        self.gain.amp(1.0, self.fade_seconds)

        logger.debug("Section '%s' started (gen %d)", self.id, self._generation)
        self.emit(SIGNAL_SECTION_STARTED, self)

    def stop(self):
        if not self._active:
            return

        self._active = False
        self._generation += 1
        token = self._generation

        self.gain.amp(0.0, self.fade_seconds,
                      on_complete=lambda: self._on_fade_out_complete(token))

        logger.debug("Section '%s' stopping (gen %d)", self.id, token)
        self.emit(SIGNAL_SECTION_STOPPED, self)

    def _on_fade_out_complete(self, token: int):
        if token != self._generation or self._active:
            logger.debug("Section '%s': stale fade-out (gen %d, now %d) ignored",
                         self.id, token, self._generation)
            return

        self.source.stop()
        logger.debug("Section '%s' halted", self.id)
        self.emit(SIGNAL_SECTION_HALTED, self)

    # -------------------------------------------------------------------------
    # Per-frame analysis
    # -------------------------------------------------------------------------

    def update(self):
        level = clamp(float(self.amplitude.get_level()), 0.0, 1.0)
        self._pulse = lerp(self._pulse, level, self.smoothing)

        raw = np.asarray(self.spectrum.analyze(), dtype=np.float64)[:self.equalizer_bins]
        values = np.clip(raw / 255.0, 0.0, 1.0)

        equalizer = [float(v) for v in values]
        if len(equalizer) < self.equalizer_bins:
            equalizer.extend([0.0] * (self.equalizer_bins - len(equalizer)))
        self._equalizer = equalizer

    def snapshot(self) -> SectionSnapshot:
        return SectionSnapshot(
            id=self.id,
            name=self.name,
            genre=self.genre,
            geometry=self._geometry,
            base_color=self._base_color,
            active_color=self._active_color,
            is_active=self._active,
            pulse=self._pulse,
            equalizer=tuple(self._equalizer),
        )

    def __repr__(self) -> str:
        state = "active" if self._active else "inactive"
        return f"AudioSection({self.id!r}, {state}, pulse={self._pulse:.3f})"
