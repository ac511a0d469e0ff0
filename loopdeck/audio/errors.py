"""
Audio exceptions.

AssetLoadError is fatal at startup; EngineSuspended is recoverable and is
absorbed (and logged) by the sections that trigger it.
"""

from __future__ import annotations


class AudioError(Exception):
    """Base class for audio engine failures."""


class AssetLoadError(AudioError):
    """A sound asset is missing or could not be decoded."""

    def __init__(self, path: str, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        message = f"Failed to load sound asset '{self.path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EngineSuspended(AudioError):
    """Playback was requested while the engine is not running and could not be resumed."""
