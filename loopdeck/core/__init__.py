"""
Core utilities: frame timing, signal routing, scalar math.
"""

from .frame import FrameState
from .mathutil import clamp, lerp, map_range
from .signal import SignalBridge, SignalEmitter, Connection

__all__ = [
    'FrameState',
    'SignalBridge',
    'SignalEmitter',
    'Connection',
    'clamp',
    'lerp',
    'map_range',
]
