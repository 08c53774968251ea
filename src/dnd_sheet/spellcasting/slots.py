"""Spell slot state management.

Stored slot entries override the class defaults level by level; levels
with no stored entry fall back to the default table. Every operation
replaces the stored mapping with a new SpellSlots rather than editing it
in place.
"""

from __future__ import annotations

from dataclasses import dataclass

from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import Identity
from dnd_sheet.models.enums import SlotField
from dnd_sheet.models.spells import SLOT_LEVELS, SpellSlotEntry, SpellSlots, is_slot_level
from dnd_sheet.spellcasting.slot_table import default_slots


logger = get_logger(__name__)


@dataclass(frozen=True)
class SlotDirtiness:
    """Difference between the current slot maxima and the class defaults.

    Attributes:
        is_dirty: True when any level's maximum differs from its default.
        changes: One line per differing level, e.g.
            'Level 2: 4 slots (default: 3)'.
    """

    is_dirty: bool
    changes: tuple[str, ...] = ()


def merge_slots(stored: SpellSlots, defaults: SpellSlots) -> SpellSlots:
    """Prefer stored entries, falling back to defaults level by level."""
    merged: dict[int, SpellSlotEntry] = {}
    for level in SLOT_LEVELS:
        entry = stored.get(level) or defaults.get(level)
        if entry is not None:
            merged[level] = entry
    return SpellSlots(merged)


def rescale_slots(current: SpellSlots, defaults: SpellSlots) -> SpellSlots:
    """Adopt new default maxima while keeping remaining slots.

    Only levels present in ``defaults`` survive. Each keeps
    ``min(old current, new max)`` so a level-up never refills spent slots.
    """
    return SpellSlots(
        {
            level: SpellSlotEntry(current=min(current.current_for(level), entry.max), max=entry.max)
            for level, entry in defaults.items()
        }
    )


def compare_to_defaults(current: SpellSlots, defaults: SpellSlots) -> SlotDirtiness:
    changes = tuple(
        f"Level {level}: {current.max_for(level)} slots (default: {defaults.max_for(level)})"
        for level in SLOT_LEVELS
        if current.max_for(level) != defaults.max_for(level)
    )
    return SlotDirtiness(is_dirty=bool(changes), changes=changes)


class SpellSlotManager:
    """Tracks the spell slots of one character.

    Attributes:
        identity: Class, subclass and level the defaults are derived from.
        slots: Stored slot entries.

    Example:
        >>> manager = SpellSlotManager(Identity(class_name="Wizard", level=3))
        >>> manager.spend_slot(2).get(2)
        SpellSlotEntry(current=1, max=2)
    """

    def __init__(self, identity: Identity, slots: SpellSlots | None = None) -> None:
        self.identity = identity
        self.slots = slots if slots is not None else SpellSlots()

    @property
    def defaults(self) -> SpellSlots:
        return default_slots(self.identity.class_name, self.identity.subclass_name, self.identity.level)

    def current_slots(self) -> SpellSlots:
        """Stored entries merged over the class defaults."""
        return merge_slots(self.slots, self.defaults)

    def update_slot(self, level: int, field: SlotField | str, value: int) -> SpellSlots:
        """Set one field of a slot level.

        Negative values are clamped to zero and ``current`` never ends up
        above ``max``. Levels outside 1-9 are ignored.

        Args:
            level: Slot level, 1-9.
            field: 'current' or 'max'.
            value: New value.

        Returns:
            The new stored slots.
        """
        if not is_slot_level(level):
            logger.warning("Ignoring slot update for invalid level", slot_level=level, field=str(field))
            return self.slots

        field = SlotField(field)
        slots = self.current_slots()
        entry = slots.get(level) or SpellSlotEntry()
        value = max(0, value)
        if field is SlotField.MAX:
            updated = SpellSlotEntry(current=min(entry.current, value), max=value)
        else:
            updated = SpellSlotEntry(current=min(value, entry.max), max=entry.max)

        self.slots = slots.with_entry(level, updated)
        logger.debug(
            "Spell slot updated",
            slot_level=level,
            field=field.value,
            current=updated.current,
            max=updated.max,
        )
        return self.slots

    def spend_slot(self, level: int) -> SpellSlots:
        """Use one slot; nothing happens when none remain."""
        entry = self.current_slots().get(level) if is_slot_level(level) else None
        if entry is None or entry.is_empty:
            return self.slots
        return self.update_slot(level, SlotField.CURRENT, entry.current - 1)

    def restore_slot(self, level: int) -> SpellSlots:
        """Regain one slot; nothing happens when the level is full."""
        entry = self.current_slots().get(level) if is_slot_level(level) else None
        if entry is None or entry.is_full:
            return self.slots
        return self.update_slot(level, SlotField.CURRENT, entry.current + 1)

    def long_rest(self) -> SpellSlots:
        """Refill every slot level to its maximum."""
        rested = {level: SpellSlotEntry.full(entry.max) for level, entry in self.current_slots().items()}
        self.slots = SpellSlots(rested)
        logger.info("Long rest taken", levels=self.slots.levels())
        return self.slots

    def reset_to_default(self) -> SpellSlots:
        """Discard stored entries in favour of the class defaults."""
        self.slots = self.defaults
        logger.info(
            "Spell slots reset to defaults",
            class_name=self.identity.class_name,
            character_level=self.identity.level,
        )
        return self.slots

    def compute_dirtiness(self) -> SlotDirtiness:
        return compare_to_defaults(self.current_slots(), self.defaults)


__all__ = [
    "SlotDirtiness",
    "merge_slots",
    "rescale_slots",
    "compare_to_defaults",
    "SpellSlotManager",
]
