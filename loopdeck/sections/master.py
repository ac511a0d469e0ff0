"""
MasterBus - The single global gain, with mute/unmute ramps.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import logging

from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_MASTER_MUTED, SIGNAL_MASTER_UNMUTED,
)

if TYPE_CHECKING:
    from ..audio.gain import GainNode

logger = logging.getLogger(__name__)

DEFAULT_MASTER_GAIN = 0.9
DEFAULT_MUTE_RAMP = 0.3


class MasterBus(SignalEmitter):
    """
    Tracks the gain it has asked for instead of reading the node back.

    gain is the last commanded target. toggle_mute() remembers the
    pre-mute target so unmuting restores exactly that value.
    """

    def __init__(
        self,
        node: GainNode,
        gain: float = DEFAULT_MASTER_GAIN,
        ramp_seconds: float = DEFAULT_MUTE_RAMP,
        signals: Optional[SignalBridge] = None,
    ):
        if not 0.0 < gain <= 1.0:
            raise ValueError(f"Master gain must be in (0, 1], got {gain}")

        self.node = node
        self.ramp_seconds = ramp_seconds
        self._gain = gain
        self._restore_gain = gain

        self.node.amp(gain)

        if signals is not None:
            self.bind_bridge(signals)

    @property
    def gain(self) -> float:
        return self._gain

    @property
    def restore_gain(self) -> float:
        """Gain that the next unmute will ramp back to."""
        return self._restore_gain

    @property
    def is_muted(self) -> bool:
        return self._gain <= 0.0

    def toggle_mute(self):
        if self._gain > 0.0:
            self._restore_gain = self._gain
            self._gain = 0.0
            self.node.amp(0.0, self.ramp_seconds)
            logger.info("Master muted (restore %.2f)", self._restore_gain)
            self.emit(SIGNAL_MASTER_MUTED, self._restore_gain)
        else:
            self._gain = self._restore_gain
            self.node.amp(self._gain, self.ramp_seconds)
            logger.info("Master unmuted (%.2f)", self._gain)
            self.emit(SIGNAL_MASTER_UNMUTED, self._gain)
