"""Known and prepared spell tracking.

A spell name is Unknown, Known, or Prepared (which implies Known). Names
are opaque: they are not checked against any spell catalog.
"""

from __future__ import annotations

from collections.abc import Iterable

from dnd_sheet.core.logging import get_logger


logger = get_logger(__name__)


class KnownSpellTracker:
    """Known and prepared spell sets of one character.

    Both sets are frozensets replaced as a pair on every change, so
    ``prepared`` is a subset of ``known`` after every call.
    """

    def __init__(self, known: Iterable[str] = (), prepared: Iterable[str] = ()) -> None:
        self.known = frozenset(name for name in known if name)
        self.prepared = frozenset(name for name in prepared if name) & self.known

    def is_known(self, name: str) -> bool:
        return bool(name) and name in self.known

    def is_prepared(self, name: str) -> bool:
        return bool(name) and name in self.prepared

    def toggle_known(self, name: str) -> bool:
        """Learn or forget a spell.

        Forgetting a prepared spell unprepares it in the same step. Learning
        a spell does not prepare it.

        Returns:
            Whether the spell is known afterwards.
        """
        if not name:
            return False
        if name in self.known:
            self.known, self.prepared = self.known - {name}, self.prepared - {name}
            logger.debug("Spell forgotten", spell=name)
            return False
        self.known = self.known | {name}
        logger.debug("Spell learned", spell=name)
        return True

    def toggle_prepared(self, name: str) -> bool:
        """Prepare or unprepare a known spell; unknown names are ignored.

        Returns:
            Whether the spell is prepared afterwards.
        """
        if not self.is_known(name):
            logger.debug("Ignoring prepare toggle for unknown spell", spell=name)
            return False
        if name in self.prepared:
            self.prepared = self.prepared - {name}
            return False
        self.prepared = self.prepared | {name}
        return True

    def clear_prepared(self) -> None:
        self.prepared = frozenset()

    @property
    def counts(self) -> tuple[int, int]:
        """(known, prepared) counts."""
        return len(self.known), len(self.prepared)


__all__ = [
    "KnownSpellTracker",
]
