"""Dice pool builder.

A pool collects dice one click at a time (two d6, one d8, ...) and turns
them into notation for the roller. Pools are immutable; every change
returns a new pool.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dnd_sheet.core.exceptions import DiceRollError


DIE_NAME_PATTERN = re.compile(r"^d(\d+)$", re.IGNORECASE)


def _normalize_die(die: str) -> str:
    match = DIE_NAME_PATTERN.match(die.strip())
    if not match or int(match.group(1)) < 1:
        raise DiceRollError(f"Not a die name: {die!r}", expression=die)
    return f"d{int(match.group(1))}"


@dataclass(frozen=True)
class DicePool:
    """Dice counts keyed by die name, in the order dice were first added.

    Example:
        >>> pool = DicePool().add("d6").add("d6").add("d8")
        >>> pool.notation
        '2d6+1d8'
    """

    entries: tuple[tuple[str, int], ...] = ()

    def count(self, die: str) -> int:
        key = _normalize_die(die)
        return dict(self.entries).get(key, 0)

    def add(self, die: str, count: int = 1) -> DicePool:
        """Add dice to the pool.

        Raises:
            DiceRollError: If ``die`` is not a die name like 'd6'.
        """
        key = _normalize_die(die)
        if count < 1:
            return self
        counts = dict(self.entries)
        counts[key] = counts.get(key, 0) + count
        return DicePool(entries=tuple(counts.items()))

    def decrement(self, die: str) -> DicePool:
        """Remove one die, dropping the entry when it was the last."""
        key = _normalize_die(die)
        counts = dict(self.entries)
        if key not in counts:
            return self
        if counts[key] <= 1:
            del counts[key]
        else:
            counts[key] -= 1
        return DicePool(entries=tuple(counts.items()))

    def remove(self, die: str) -> DicePool:
        key = _normalize_die(die)
        return DicePool(entries=tuple((name, qty) for name, qty in self.entries if name != key))

    def clear(self) -> DicePool:
        return DicePool()

    @property
    def notation(self) -> str:
        return "+".join(f"{qty}{name}" for name, qty in self.entries)

    @property
    def total_dice(self) -> int:
        return sum(qty for _, qty in self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def is_single_die(self) -> bool:
        """True when the pool holds exactly one die."""
        return self.total_dice == 1


__all__ = [
    "DicePool",
]
