"""
GainNode - Gain scalar with sample-accurate linear ramps.
"""

from __future__ import annotations
from typing import Callable, Optional, TYPE_CHECKING
import threading
import numpy as np

if TYPE_CHECKING:
    from .engine import AudioEngine


class GainNode:
    """
    Gain stage applied to a stereo block inside the audio callback.

    amp() is fire-and-forget: it replaces the current envelope target
    starting from the value reached so far, and never waits for the ramp.
    An optional completion callback is scheduled on the engine clock and
    runs on the thread that calls engine.poll().

    Usage:
        gain = engine.create_gain(0.0)
        gain.amp(1.0, 0.4)                      # fade in
        gain.amp(0.0, 0.4, on_complete=halt)    # fade out, then halt
    """

    def __init__(self, engine: AudioEngine, value: float = 1.0, name: str = ""):
        if value < 0.0:
            raise ValueError(f"Gain must be >= 0, got {value}")

        self._engine = engine
        self.sample_rate = engine.sample_rate
        self.name = name

        self._lock = threading.Lock()
        self._value = float(value)
        self._target = float(value)
        self._step = 0.0
        self._remaining = 0  # Frames left in the active ramp

    @property
    def value(self) -> float:
        """Gain reached by the audio thread so far."""
        with self._lock:
            return self._value

    @property
    def target(self) -> float:
        """Gain the node is heading towards (equals value when idle)."""
        with self._lock:
            return self._target

    @property
    def is_ramping(self) -> bool:
        with self._lock:
            return self._remaining > 0

    def amp(self, target: float, ramp_seconds: float = 0.0,
            on_complete: Optional[Callable[[], None]] = None):
        """
        Ramp to target over ramp_seconds.

        Args:
            target: Destination gain (>= 0)
            ramp_seconds: Ramp length; 0 jumps immediately
            on_complete: Called (via engine.poll) once the ramp time has elapsed
        """
        if target < 0.0:
            raise ValueError(f"Gain must be >= 0, got {target}")

        frames = int(round(max(0.0, ramp_seconds) * self.sample_rate))

        with self._lock:
            self._target = float(target)
            if frames <= 0:
                self._value = self._target
                self._step = 0.0
                self._remaining = 0
            else:
                self._step = (self._target - self._value) / frames
                self._remaining = frames

        if on_complete is not None:
            self._engine.call_later_frames(frames, on_complete)

    def envelope(self, frames: int) -> np.ndarray:
        """Advance the ramp by frames and return the per-frame gain."""
        with self._lock:
            env = np.full(frames, self._target, dtype=np.float32)
            if self._remaining > 0:
                k = min(frames, self._remaining)
                env[:k] = self._value + self._step * np.arange(1, k + 1, dtype=np.float64)
                self._remaining -= k
                if self._remaining == 0:
                    self._value = self._target
                else:
                    self._value += self._step * k
            return env

    def process(self, block: np.ndarray) -> np.ndarray:
        """Apply gain to a (frames, channels) block."""
        env = self.envelope(block.shape[0])
        if block.ndim == 1:
            return block * env
        return block * env[:, None]

    def __repr__(self) -> str:
        return f"GainNode({self.name!r}, value={self._value:.3f}, target={self._target:.3f})"
