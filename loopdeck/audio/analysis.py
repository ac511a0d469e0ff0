"""
Analysis taps - Live amplitude and spectrum readings from an AudioHandle.

Both taps read the handle's recent mono history, so they can be polled
from the window thread once per frame without touching the audio thread.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    from .handle import AudioHandle


class AmplitudeTap:
    """
    RMS level meter.

    Usage:
        amp = AmplitudeTap()
        amp.set_input(handle)
        level = amp.get_level()   # 0..1
    """

    def __init__(self, window: int = 1024, smoothing: float = 0.0):
        self.window = window
        self.smoothing = smoothing
        self._input: Optional[AudioHandle] = None
        self._volume = 0.0

    @property
    def input(self) -> Optional[AudioHandle]:
        return self._input

    def set_input(self, handle: Optional[AudioHandle]):
        self._input = handle
        self._volume = 0.0

    def get_level(self) -> float:
        if self._input is None:
            return 0.0

        samples = self._input.tap(self.window)
        rms = float(np.sqrt(np.mean(samples.astype(np.float64) ** 2)))

        # Peak-hold style decay when smoothing > 0
        self._volume = max(rms, self._volume * self.smoothing)
        return min(1.0, max(0.0, self._volume))


class SpectrumTap:
    """
    Byte-scaled magnitude spectrum, modelled on a browser AnalyserNode.

    - fft_size = 2 * bins, Blackman window
    - magnitudes smoothed over successive analyze() calls
    - dB range [min_db, max_db] mapped linearly onto [0, 255]
    """

    def __init__(
        self,
        bins: int = 32,
        smoothing: float = 0.8,
        min_db: float = -100.0,
        max_db: float = -30.0,
    ):
        if bins < 16:
            raise ValueError(f"SpectrumTap needs at least 16 bins, got {bins}")
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")

        self.bins = bins
        self.fft_size = bins * 2
        self.smoothing = smoothing
        self.min_db = min_db
        self.max_db = max_db

        self._input: Optional[AudioHandle] = None
        self._window = np.blackman(self.fft_size)
        self._smoothed = np.zeros(bins, dtype=np.float64)

    @property
    def input(self) -> Optional[AudioHandle]:
        return self._input

    def set_input(self, handle: Optional[AudioHandle]):
        self._input = handle
        self._smoothed[:] = 0.0

    def analyze(self) -> np.ndarray:
        """
        Returns:
            Float array of length bins, each value in [0, 255]
        """
        if self._input is None:
            return np.zeros(self.bins, dtype=np.float32)

        samples = self._input.tap(self.fft_size).astype(np.float64)
        spectrum = np.fft.rfft(samples * self._window)
        magnitude = np.abs(spectrum[:self.bins]) / self.fft_size

        self._smoothed = self.smoothing * self._smoothed + (1.0 - self.smoothing) * magnitude

        with np.errstate(divide='ignore'):
            db = 20.0 * np.log10(self._smoothed)

        scaled = (db - self.min_db) * (255.0 / (self.max_db - self.min_db))
        scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0)
        return np.clip(np.floor(scaled), 0.0, 255.0).astype(np.float32)
