"""
SectionRegistry - Ordered owner of all sections.

Insertion order is render order and hit-test priority. Sections are
never removed once added.
"""

from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, Optional
import logging

from .section import AudioSection, SectionSnapshot

logger = logging.getLogger(__name__)


class SectionRegistry:
    """
    Resolves pointer hits to sections and broadcasts global commands.

    Usage:
        registry = SectionRegistry([jazz, rock, edm])
        registry.dispatch(mouse_x, mouse_y)   # toggle the clicked section
        registry.toggle_all()                 # space bar
        registry.reset_all()                  # 'R'
    """

    def __init__(self, sections: Optional[Iterable[AudioSection]] = None):
        self._sections: List[AudioSection] = []
        self._by_id: Dict[str, AudioSection] = {}
        for section in sections or ():
            self.add(section)

    def add(self, section: AudioSection) -> AudioSection:
        if section.id in self._by_id:
            raise ValueError(f"Section id '{section.id}' already registered")
        self._sections.append(section)
        self._by_id[section.id] = section
        return section

    def get(self, section_id: str) -> Optional[AudioSection]:
        return self._by_id.get(section_id)

    def __iter__(self) -> Iterator[AudioSection]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    @property
    def active_sections(self) -> List[AudioSection]:
        return [s for s in self._sections if s.is_active]

    # -------------------------------------------------------------------------
    # Pointer
    # -------------------------------------------------------------------------

    def hit_test(self, px: float, py: float) -> Optional[AudioSection]:
        """First section (in insertion order) strictly containing the point."""
        for section in self._sections:
            if section.contains(px, py):
                return section
        return None

    def dispatch(self, px: float, py: float) -> Optional[AudioSection]:
        """Toggle the section under the pointer, if any."""
        section = self.hit_test(px, py)
        if section is not None:
            section.toggle()
        return section

    # -------------------------------------------------------------------------
    # Global commands
    # -------------------------------------------------------------------------

    def toggle_all(self):
        """Stop everything if anything plays, otherwise start everything."""
        any_active = any(s.is_active for s in self._sections)
        if any_active:
            for section in self._sections:
                section.stop()
        else:
            for section in self._sections:
                section.start()
        logger.debug("toggle_all -> %s", "stopped" if any_active else "started")

    def reset_all(self):
        for section in self._sections:
            section.stop()

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def update_all(self):
        for section in self._sections:
            section.update()

    def snapshots(self) -> List[SectionSnapshot]:
        return [s.snapshot() for s in self._sections]
