"""
Sections: per-loop playback controllers, their registry and the master bus.
"""

from .section import AudioSection, SectionSnapshot, EQUALIZER_BINS
from .registry import SectionRegistry
from .master import MasterBus
from .factory import build_registry, build_master

__all__ = [
    'AudioSection',
    'SectionSnapshot',
    'EQUALIZER_BINS',
    'SectionRegistry',
    'MasterBus',
    'build_registry',
    'build_master',
]
