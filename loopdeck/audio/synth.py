"""
Demo loops - Generated stand-ins for the section loops.

Used by the app's --demo flag so the deck can run without asset files.
"""

from __future__ import annotations
from typing import Callable, Dict
import numpy as np


def generate_sine_wave(
    frequency: float,
    duration: float,
    sample_rate: int = 44100,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Generate a sine wave."""
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False, dtype=np.float32)
    return (np.sin(2 * np.pi * frequency * t) * amplitude).astype(np.float32)


def _decay(length: int, sample_rate: int, rate: float) -> np.ndarray:
    t = np.arange(length, dtype=np.float32) / sample_rate
    return np.exp(-t * rate).astype(np.float32)


def _place(buffer: np.ndarray, sound: np.ndarray, start: int):
    end = min(len(buffer), start + len(sound))
    if start < end:
        buffer[start:end] += sound[:end - start]


def _jazz(sample_rate: int, bpm: float, bars: int) -> np.ndarray:
    """Walking bass with a swung ride."""
    beat = int(sample_rate * 60.0 / bpm)
    out = np.zeros(beat * 4 * bars, dtype=np.float32)
    walk = [55.0, 61.7, 65.4, 73.4, 82.4, 73.4, 65.4, 61.7]

    for i in range(4 * bars):
        note = generate_sine_wave(walk[i % len(walk)], 60.0 / bpm, sample_rate, 0.45)
        _place(out, note * _decay(len(note), sample_rate, 4.0), i * beat)

        ride = np.random.randn(beat // 3).astype(np.float32) * 0.08
        _place(out, ride * _decay(len(ride), sample_rate, 30.0), i * beat)
        _place(out, ride * 0.6, i * beat + (2 * beat) // 3)
    return out


def _rock(sample_rate: int, bpm: float, bars: int) -> np.ndarray:
    """Clipped power chord on eighths with kick and snare."""
    beat = int(sample_rate * 60.0 / bpm)
    eighth = beat // 2
    out = np.zeros(beat * 4 * bars, dtype=np.float32)

    for i in range(8 * bars):
        chord = (generate_sine_wave(82.4, 0.5 * 60.0 / bpm, sample_rate, 0.4)
                 + generate_sine_wave(123.5, 0.5 * 60.0 / bpm, sample_rate, 0.3))
        chord = np.tanh(chord * 4.0) * 0.3
        _place(out, chord * _decay(len(chord), sample_rate, 6.0), i * eighth)

    for i in range(4 * bars):
        if i % 2 == 0:
            t = np.arange(int(sample_rate * 0.15), dtype=np.float32) / sample_rate
            kick = np.sin(2 * np.pi * 60 * np.exp(-t * 25) * t) * np.exp(-t * 15) * 0.7
            _place(out, kick.astype(np.float32), i * beat)
        else:
            snare = np.random.randn(int(sample_rate * 0.12)).astype(np.float32) * 0.35
            _place(out, snare * _decay(len(snare), sample_rate, 18.0), i * beat)
    return out


def _edm(sample_rate: int, bpm: float, bars: int) -> np.ndarray:
    """Four-on-the-floor kick, off-beat hats and a saw stab."""
    beat = int(sample_rate * 60.0 / bpm)
    out = np.zeros(beat * 4 * bars, dtype=np.float32)
    t_kick = np.arange(int(sample_rate * 0.2), dtype=np.float32) / sample_rate
    kick = (np.sin(2 * np.pi * 50 * np.exp(-t_kick * 20) * t_kick)
            * np.exp(-t_kick * 12) * 0.8).astype(np.float32)

    for i in range(4 * bars):
        _place(out, kick, i * beat)

        hat = np.random.randn(int(sample_rate * 0.04)).astype(np.float32) * 0.15
        _place(out, hat * _decay(len(hat), sample_rate, 60.0), i * beat + beat // 2)

        t = np.arange(beat // 2, dtype=np.float32) / sample_rate
        saw = (2.0 * ((t * 220.0) % 1.0) - 1.0) * 0.12
        _place(out, (saw * _decay(len(saw), sample_rate, 8.0)).astype(np.float32), i * beat + beat // 2)
    return out


_GENERATORS: Dict[str, Callable[[int, float, int], np.ndarray]] = {
    "jazz": _jazz,
    "rock": _rock,
    "edm": _edm,
}

_TEMPOS = {"jazz": 132.0, "rock": 120.0, "edm": 126.0}


def generate_demo_loop(genre: str, sample_rate: int = 44100, bars: int = 2) -> np.ndarray:
    """
    Generate a seamless demo loop for a genre.

    Args:
        genre: "jazz", "rock" or "edm" (case-insensitive); anything else
               falls back to a plain sine pad
        sample_rate: Output sample rate
        bars: Loop length in 4/4 bars

    Returns:
        Mono float32 array, peak-normalized to 0.8
    """
    key = genre.lower()
    generator = _GENERATORS.get(key)

    if generator is None:
        data = generate_sine_wave(220.0, 2.0 * bars, sample_rate, 0.3)
    else:
        data = generator(sample_rate, _TEMPOS[key], bars)

    peak = float(np.max(np.abs(data))) if len(data) else 0.0
    if peak > 0:
        data = data * (0.8 / peak)
    return data.astype(np.float32)
