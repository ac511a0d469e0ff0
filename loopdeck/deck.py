"""
Deck - Owns the engine, sections, master bus and input routing.

Created once at startup; shutdown() issues reset_all() and closes the
audio device.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from .audio.engine import AudioEngine
from .config import DeckConfig
from .core.frame import FrameState
from .core.signal import SignalBridge, SIGNAL_DT
from .input import InputRouter
from .sections.factory import build_master, build_registry
from .sections.master import MasterBus
from .sections.registry import SectionRegistry

logger = logging.getLogger(__name__)


@dataclass
class Deck:
    config: DeckConfig
    engine: AudioEngine
    registry: SectionRegistry
    master: MasterBus
    router: InputRouter
    signals: SignalBridge

    @classmethod
    def create(
        cls,
        config: Optional[DeckConfig] = None,
        demo: bool = False,
        offline: bool = False,
        engine: Optional[AudioEngine] = None,
    ) -> Deck:
        """
        Load every loop and wire the deck together.

        Raises:
            AssetLoadError: If a configured loop cannot be loaded
        """
        config = config or DeckConfig()
        signals = SignalBridge()
        engine = engine or AudioEngine(
            sample_rate=config.sample_rate,
            block_size=config.block_size,
            offline=offline,
        )

        registry = build_registry(config, engine, signals=signals, demo=demo)
        master = build_master(config, engine, signals=signals)
        router = InputRouter(registry, master, signals=signals)

        return cls(config, engine, registry, master, router, signals)

    def tick(self, frame: FrameState):
        """Per-frame step: run due ramp completions, then refresh every section."""
        self.engine.poll()
        self.registry.update_all()
        self.signals.emit(SIGNAL_DT, frame)

    def shutdown(self):
        self.registry.reset_all()
        self.engine.close()
        logger.info("Deck shut down")
