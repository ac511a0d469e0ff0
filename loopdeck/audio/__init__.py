"""
LOOPDECK Audio System
=====================

Loop playback, gain ramps and live analysis taps.

Quick Start:
    from loopdeck.audio import AudioEngine, AmplitudeTap

    audio = AudioEngine()
    jazz = audio.load_sound("assets/audio/jazz_loop.mp3")
    audio.route(jazz)
    audio.resume()
    jazz.loop()

    meter = AmplitudeTap()
    meter.set_input(jazz)
    level = meter.get_level()
"""

from .engine import AudioEngine, Route, SOUNDDEVICE_AVAILABLE
from .errors import AudioError, AssetLoadError, EngineSuspended
from .gain import GainNode
from .handle import AudioHandle
from .analysis import AmplitudeTap, SpectrumTap
from .synth import generate_demo_loop, generate_sine_wave

__all__ = [
    'AudioEngine',
    'Route',
    'SOUNDDEVICE_AVAILABLE',
    'AudioError',
    'AssetLoadError',
    'EngineSuspended',
    'GainNode',
    'AudioHandle',
    'AmplitudeTap',
    'SpectrumTap',
    'generate_demo_loop',
    'generate_sine_wave',
]
