import numpy as np
import pytest

from loopdeck.audio import AudioEngine
from loopdeck.config import DEFAULT_SECTIONS, SectionConfig
from loopdeck.sections import AudioSection

SAMPLE_RATE = 8000


class ConstantAmplitude:
    """Amplitude tap stand-in returning a fixed level."""

    def __init__(self, level=0.0):
        self.level = level
        self.input = None
        self.connects = 0

    def set_input(self, handle):
        self.input = handle
        self.connects += 1

    def get_level(self):
        return self.level


class FixedSpectrum:
    """Spectrum tap stand-in returning a fixed raw spectrum."""

    def __init__(self, raw=None):
        self.raw = np.zeros(32) if raw is None else np.asarray(raw, dtype=float)
        self.input = None
        self.connects = 0

    def set_input(self, handle):
        self.input = handle
        self.connects += 1

    def analyze(self):
        return self.raw


@pytest.fixture
def engine():
    return AudioEngine(sample_rate=SAMPLE_RATE, block_size=256, offline=True)


def make_section(engine, config: SectionConfig = DEFAULT_SECTIONS[0], level=0.0, raw=None,
                 signals=None, data=None, **kwargs):
    if data is None:
        data = np.full(SAMPLE_RATE, 0.5, dtype=np.float32)
    handle = engine.load_from_array(config.id, data)
    return AudioSection(
        config,
        handle,
        engine,
        amplitude=ConstantAmplitude(level),
        spectrum=FixedSpectrum(raw),
        signals=signals,
        **kwargs,
    )


def frames(seconds):
    return int(round(seconds * SAMPLE_RATE))
