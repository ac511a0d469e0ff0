"""
Frame State

Immutable state passed to sections and views each frame.
Contains timing info and frame identification.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class FrameState:
    """
    Immutable frame information passed to the per-frame update.
    """
    frame_id: int   # Monotonically increasing frame counter
    dt: float       # Delta time since last frame (seconds)
    t: float        # Total elapsed time (seconds)

    @property
    def fps(self) -> float:
        """Estimated FPS from delta time."""
        return 1.0 / max(1e-6, self.dt)
