"""
AudioHandle - A decoded loop with its own playback cursor.
"""

from __future__ import annotations
from typing import Optional
import threading
import numpy as np


class AudioHandle:
    """
    A loaded audio buffer that can loop.

    The engine owns handles; sections only hold references to them.
    render() runs on the audio thread and records a short mono history
    that analysis taps read from the window thread.
    """

    def __init__(
        self,
        name: str,
        data: np.ndarray,
        sample_rate: int,
        path: Optional[str] = None,
        history_size: int = 2048,
    ):
        if data.ndim == 1:
            data = np.column_stack([data, data])
        if data.dtype != np.float32:
            data = data.astype(np.float32)

        self.name = name
        self.data = data  # Stereo float32, shape (frames, 2)
        self.sample_rate = sample_rate
        self.path = path

        self._lock = threading.Lock()
        self._position = 0
        self._playing = False
        self._looping = False
        self._history = np.zeros(history_size, dtype=np.float32)

    @property
    def num_frames(self) -> int:
        return self.data.shape[0]

    @property
    def duration(self) -> float:
        return self.num_frames / self.sample_rate

    @property
    def position(self) -> int:
        with self._lock:
            return self._position

    def loop(self):
        """Start looped playback from the beginning."""
        with self._lock:
            self._position = 0
            self._playing = True
            self._looping = True

    def play(self):
        """Start one-shot playback from the beginning."""
        with self._lock:
            self._position = 0
            self._playing = True
            self._looping = False

    def stop(self):
        """Halt playback and rewind."""
        with self._lock:
            self._playing = False
            self._looping = False
            self._position = 0
            self._history[:] = 0.0

    def is_playing(self) -> bool:
        with self._lock:
            return self._playing

    def render(self, frames: int) -> np.ndarray:
        """
        Produce the next block of audio.

        Returns:
            Stereo float32 array of shape (frames, 2); silence when stopped.
        """
        output = np.zeros((frames, 2), dtype=np.float32)

        with self._lock:
            if self._playing and self.num_frames > 0:
                written = 0
                while written < frames:
                    remaining = self.num_frames - self._position
                    to_copy = min(remaining, frames - written)
                    output[written:written + to_copy] = \
                        self.data[self._position:self._position + to_copy]
                    written += to_copy
                    self._position += to_copy

                    if self._position >= self.num_frames:
                        if self._looping:
                            self._position = 0
                        else:
                            self._playing = False
                            self._position = 0
                            break

            mono = (output[:, 0] + output[:, 1]) * 0.5
            self._push_history(mono)

        return output

    def tap(self, num_samples: int) -> np.ndarray:
        """Most recent mono samples, oldest first (zero padded on the left)."""
        with self._lock:
            if num_samples <= len(self._history):
                return self._history[-num_samples:].copy()
            padded = np.zeros(num_samples, dtype=np.float32)
            padded[-len(self._history):] = self._history
            return padded

    def _push_history(self, mono: np.ndarray):
        n = len(mono)
        size = len(self._history)
        if n >= size:
            self._history[:] = mono[-size:]
        else:
            self._history[:-n] = self._history[n:]
            self._history[-n:] = mono

    def __repr__(self) -> str:
        return f"AudioHandle({self.name!r}, {self.duration:.2f}s)"
