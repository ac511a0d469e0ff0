"""
LOOPDECK - Multi-track loop player with live spectral visualization.

Core components:
- AudioEngine: Device output, loop handles, gain ramps, timed callbacks
- AudioSection: Per-loop start/stop state machine + pulse/equalizer smoothing
- SectionRegistry: Ordered sections, hit testing, global commands
- MasterBus: Global gain with mute/unmute ramps
- InputRouter: Pointer/key events -> commands
- SignalBridge: Event routing system
"""

from .config import DeckConfig, SectionConfig, ConfigError, DEFAULT_SECTIONS, load_config
from .audio import AudioEngine, AssetLoadError, EngineSuspended
from .sections import AudioSection, SectionRegistry, MasterBus, build_registry, build_master
from .input import InputRouter
from .core import FrameState, SignalBridge

__version__ = "0.1.0"

__all__ = [
    'DeckConfig',
    'SectionConfig',
    'ConfigError',
    'DEFAULT_SECTIONS',
    'load_config',
    'AudioEngine',
    'AssetLoadError',
    'EngineSuspended',
    'AudioSection',
    'SectionRegistry',
    'MasterBus',
    'build_registry',
    'build_master',
    'InputRouter',
    'FrameState',
    'SignalBridge',
]
