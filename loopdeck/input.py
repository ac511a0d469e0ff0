"""
InputRouter - Turns pointer presses and key characters into deck commands.

Controls:
- Left click: toggle the section under the pointer
- SPACE: start everything, or stop everything if anything plays
- R: stop every section
- M: mute / unmute the master bus
"""

from __future__ import annotations
from typing import Callable, Dict, Optional, TYPE_CHECKING
import logging

from .core.signal import SignalBridge, SignalEmitter, SIGNAL_KEY_DOWN, SIGNAL_POINTER_DOWN

if TYPE_CHECKING:
    from .sections.master import MasterBus
    from .sections.registry import SectionRegistry
    from .sections.section import AudioSection

logger = logging.getLogger(__name__)

LEFT_BUTTON = 1

COMMAND_TOGGLE_ALL = "toggle_all"
COMMAND_RESET_ALL = "reset_all"
COMMAND_TOGGLE_MUTE = "toggle_mute"

# Keys are matched case-insensitively
DEFAULT_KEY_MAP: Dict[str, str] = {
    " ": COMMAND_TOGGLE_ALL,
    "r": COMMAND_RESET_ALL,
    "m": COMMAND_TOGGLE_MUTE,
}


class InputRouter(SignalEmitter):

    def __init__(
        self,
        registry: SectionRegistry,
        master: MasterBus,
        key_map: Optional[Dict[str, str]] = None,
        signals: Optional[SignalBridge] = None,
    ):
        self.registry = registry
        self.master = master
        self.key_map = {k.lower(): v for k, v in (key_map or DEFAULT_KEY_MAP).items()}

        self._commands: Dict[str, Callable[[], None]] = {
            COMMAND_TOGGLE_ALL: registry.toggle_all,
            COMMAND_RESET_ALL: registry.reset_all,
            COMMAND_TOGGLE_MUTE: master.toggle_mute,
        }

        unknown = set(self.key_map.values()) - set(self._commands)
        if unknown:
            raise ValueError(f"Unknown commands in key map: {', '.join(sorted(unknown))}")

        if signals is not None:
            self.bind_bridge(signals)

    def pointer_pressed(self, x: float, y: float, button: int = LEFT_BUTTON) -> Optional[AudioSection]:
        """Toggle at most one section: the first one under the pointer."""
        if button != LEFT_BUTTON:
            return None
        self.emit(SIGNAL_POINTER_DOWN, x, y, button)
        section = self.registry.dispatch(x, y)
        if section is not None:
            logger.debug("Click (%.0f, %.0f) -> %s", x, y, section.id)
        return section

    def key_pressed(self, char: str) -> Optional[str]:
        """Run the command bound to char. Returns the command name, or None."""
        if not char:
            return None
        self.emit(SIGNAL_KEY_DOWN, char)
        command = self.key_map.get(char.lower())
        if command is None:
            return None
        logger.debug("Key %r -> %s", char, command)
        self._commands[command]()
        return command
