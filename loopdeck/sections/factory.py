"""
Deck assembly - build the registry and master bus from a DeckConfig.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import logging

from ..audio.analysis import AmplitudeTap, SpectrumTap
from ..audio.synth import generate_demo_loop
from .master import MasterBus
from .registry import SectionRegistry
from .section import AudioSection

if TYPE_CHECKING:
    from ..audio.engine import AudioEngine
    from ..config import DeckConfig
    from ..core.signal import SignalBridge

logger = logging.getLogger(__name__)


def build_registry(
    config: DeckConfig,
    engine: AudioEngine,
    signals: Optional[SignalBridge] = None,
    demo: bool = False,
) -> SectionRegistry:
    """
    Load every section's loop and wrap it in an AudioSection.

    Args:
        demo: Use generated loops instead of the configured sound files

    Raises:
        AssetLoadError: If any configured sound cannot be loaded
    """
    registry = SectionRegistry()

    for section_cfg in config.sections:
        if demo:
            data = generate_demo_loop(section_cfg.genre, engine.sample_rate)
            handle = engine.load_from_array(section_cfg.id, data)
        else:
            handle = engine.load_sound(config.sound_path(section_cfg), name=section_cfg.id)

        registry.add(AudioSection(
            section_cfg,
            handle,
            engine,
            amplitude=AmplitudeTap(),
            spectrum=SpectrumTap(bins=config.fft_bins, smoothing=config.fft_smoothing),
            fade_seconds=config.fade_seconds,
            smoothing=config.smoothing,
            equalizer_bins=config.equalizer_bins,
            signals=signals,
        ))

    logger.info("Built %d sections%s", len(registry), " (demo loops)" if demo else "")
    return registry


def build_master(
    config: DeckConfig,
    engine: AudioEngine,
    signals: Optional[SignalBridge] = None,
) -> MasterBus:
    return MasterBus(
        engine.master,
        gain=config.master_gain,
        ramp_seconds=config.mute_ramp_seconds,
        signals=signals,
    )
