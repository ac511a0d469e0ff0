"""
AudioEngine - Main audio output coordinator.

Owns decoded loops, routes each through its gain node into the master
gain, and streams the mix through the audio device.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
import heapq
import logging
import os
import threading
import numpy as np
import soundfile as sf

from .errors import AssetLoadError, EngineSuspended
from .gain import GainNode
from .handle import AudioHandle

logger = logging.getLogger(__name__)

try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    # OSError: the module imports but PortAudio itself is missing
    SOUNDDEVICE_AVAILABLE = False
    logger.warning("sounddevice not available. Audio will be silent.")


@dataclass
class Route:
    """A handle feeding the master bus through its own gain stage."""
    handle: AudioHandle
    gain: GainNode


class AudioEngine:
    """
    Main audio engine coordinating output, routing and timed callbacks.

    The engine keeps a frame clock that advances with every processed
    block. Callbacks scheduled with call_later() become due on that clock
    and are executed by poll(), which the window thread calls once per
    frame - so ramp completions never run on the audio thread.

    Usage:
        audio = AudioEngine()
        jazz = audio.load_sound("assets/audio/jazz_loop.mp3")
        fader = audio.create_gain(0.0)
        audio.route(jazz, fader)
        audio.resume()

        jazz.loop()
        fader.amp(1.0, 0.4)

        # Each frame:
        audio.poll()

    With offline=True there is no device stream: the caller advances the
    clock with process(frames).
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        block_size: int = 512,
        offline: bool = False,
        device: Optional[int] = None,
    ):
        self.sample_rate = sample_rate
        self.block_size = block_size
        self.offline = offline
        self.device = device

        self._lock = threading.RLock()
        self._handles: Dict[str, AudioHandle] = {}
        self._routes: List[Route] = []
        self.master = GainNode(self, value=1.0, name="master")

        # Audio stream
        self._stream: Optional[sd.OutputStream] = None
        self._running = False

        # Frame clock + scheduled callbacks (due_frame, seq, callback)
        self._clock = 0
        self._timers: List[Tuple[int, int, Callable[[], None]]] = []
        self._timer_seq = 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    def resume(self) -> bool:
        """Start (or restart) audio output. Returns False if no device is usable."""
        if self._running:
            return True

        if self.offline:
            self._running = True
            logger.info("AudioEngine: Running offline (sr=%d)", self.sample_rate)
            return True

        if not SOUNDDEVICE_AVAILABLE:
            logger.warning("AudioEngine: sounddevice not available")
            return False

        try:
            if self._stream is None:
                self._stream = sd.OutputStream(
                    samplerate=self.sample_rate,
                    blocksize=self.block_size,
                    channels=2,
                    dtype='float32',
                    device=self.device,
                    callback=self._audio_callback,
                )
            self._stream.start()
            self._running = True
            logger.info("AudioEngine: Started (sr=%d, buf=%d)", self.sample_rate, self.block_size)
            return True
        except sd.PortAudioError as e:
            logger.warning("AudioEngine: Failed to start: %s", e)
            return False

    def ensure_running(self):
        """Resume if suspended; raise EngineSuspended when that fails."""
        if self._running:
            return
        logger.info("AudioEngine: Suspended, resuming before playback")
        if not self.resume():
            raise EngineSuspended("Audio engine is suspended and could not be resumed")

    def suspend(self):
        """Pause audio output, keeping the stream open."""
        if self._stream is not None and self._running:
            self._stream.stop()
        self._running = False
        logger.info("AudioEngine: Suspended")

    def close(self):
        """Stop audio output and release the device."""
        self._running = False
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        logger.info("AudioEngine: Stopped")

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    def load_sound(self, path: str, name: Optional[str] = None) -> AudioHandle:
        """
        Decode a sound file into a handle.

        Raises:
            AssetLoadError: If the file is missing or cannot be decoded
        """
        name = name or os.path.splitext(os.path.basename(path))[0]

        if not os.path.exists(path):
            raise AssetLoadError(path, "file not found")

        try:
            data, sr = sf.read(path, dtype='float32', always_2d=True)
        except (RuntimeError, OSError, ValueError) as e:
            # soundfile raises LibsndfileError (a RuntimeError) on corrupt input
            raise AssetLoadError(path, str(e)) from e

        if data.shape[0] == 0:
            raise AssetLoadError(path, "no audio frames")

        handle = self.load_from_array(name, data, sr, path=path)
        logger.info("AudioEngine: Loaded '%s' (%.2fs)", name, handle.duration)
        return handle

    def load_from_array(
        self,
        name: str,
        data: np.ndarray,
        sample_rate: Optional[int] = None,
        path: Optional[str] = None,
    ) -> AudioHandle:
        """Register a handle from a numpy array (mono or multi-channel)."""
        sr = sample_rate or self.sample_rate
        if data.dtype != np.float32:
            data = data.astype(np.float32)

        data = _to_stereo(data)
        if sr != self.sample_rate:
            data = _resample(data, sr, self.sample_rate)

        handle = AudioHandle(name, data, self.sample_rate, path=path)
        with self._lock:
            self._handles[name] = handle
        return handle

    def get_handle(self, name: str) -> Optional[AudioHandle]:
        return self._handles.get(name)

    @property
    def handle_names(self) -> List[str]:
        return list(self._handles.keys())

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def create_gain(self, value: float = 1.0, name: str = "") -> GainNode:
        return GainNode(self, value=value, name=name)

    def route(self, handle: AudioHandle, gain: Optional[GainNode] = None) -> GainNode:
        """Feed handle into the master bus through gain (created if omitted)."""
        with self._lock:
            for existing in self._routes:
                if existing.handle is handle and (gain is None or existing.gain is gain):
                    return existing.gain
            gain = gain or self.create_gain(1.0, name=handle.name)
            self._routes.append(Route(handle=handle, gain=gain))
        return gain

    @property
    def route_count(self) -> int:
        return len(self._routes)

    # -------------------------------------------------------------------------
    # Processing
    # -------------------------------------------------------------------------

    def process(self, frames: int) -> np.ndarray:
        """
        Render and mix the next block, advancing the frame clock.

        Returns:
            Stereo float32 array of shape (frames, 2)
        """
        output = np.zeros((frames, 2), dtype=np.float32)

        with self._lock:
            # A handle shared by several routes advances once per block
            blocks: Dict[int, np.ndarray] = {}
            for route in self._routes:
                key = id(route.handle)
                if key not in blocks:
                    blocks[key] = route.handle.render(frames)
                output += route.gain.process(blocks[key])

            output = self.master.process(output)
            self._clock += frames

        np.clip(output, -1.0, 1.0, out=output)
        return output

    def _audio_callback(self, outdata: np.ndarray, frames: int,
                        time_info, status):
        """Audio callback - runs on audio thread."""
        if status:
            logger.warning("AudioEngine: %s", status)
        outdata[:] = self.process(frames)

    # -------------------------------------------------------------------------
    # Timed callbacks
    # -------------------------------------------------------------------------

    @property
    def frame_clock(self) -> int:
        with self._lock:
            return self._clock

    @property
    def now(self) -> float:
        """Seconds of audio processed so far."""
        return self.frame_clock / self.sample_rate

    def call_later(self, seconds: float, callback: Callable[[], None]):
        """Schedule callback to run once seconds of audio have been processed."""
        self.call_later_frames(int(round(max(0.0, seconds) * self.sample_rate)), callback)

    def call_later_frames(self, frames: int, callback: Callable[[], None]):
        with self._lock:
            due = self._clock + max(0, frames)
            heapq.heappush(self._timers, (due, self._timer_seq, callback))
            self._timer_seq += 1

    @property
    def pending_callbacks(self) -> int:
        return len(self._timers)

    def poll(self) -> int:
        """
        Run callbacks whose due time has passed. Call from the window thread.

        Returns:
            Number of callbacks executed
        """
        due: List[Callable[[], None]] = []
        with self._lock:
            while self._timers and self._timers[0][0] <= self._clock:
                due.append(heapq.heappop(self._timers)[2])

        for callback in due:
            try:
                callback()
            except Exception:
                logger.exception("AudioEngine: Scheduled callback failed")
        return len(due)


# =============================================================================
# Helpers
# =============================================================================

def _to_stereo(data: np.ndarray) -> np.ndarray:
    if data.ndim == 1:
        return np.column_stack([data, data])
    if data.shape[1] == 1:
        return np.column_stack([data[:, 0], data[:, 0]])
    if data.shape[1] > 2:
        return data[:, :2].copy()
    return data


def _resample(data: np.ndarray, src_rate: int, dst_rate: int) -> np.ndarray:
    """Simple linear resampling."""
    if src_rate == dst_rate:
        return data

    ratio = dst_rate / src_rate
    new_length = max(1, int(len(data) * ratio))
    indices = np.linspace(0, len(data) - 1, new_length)
    result = np.zeros((new_length, data.shape[1]), dtype=np.float32)
    for ch in range(data.shape[1]):
        result[:, ch] = np.interp(indices, np.arange(len(data)), data[:, ch])
    return result
