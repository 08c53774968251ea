"""Default spell slot tables and caster classification.

Slot maxima per character level come from the D&D 5E multiclass
spellcaster tables. Each row lists the maxima for slot levels 1, 2, ...;
trailing levels with no slots are left off.
"""

from __future__ import annotations

from types import MappingProxyType

from dnd_sheet.core.constants import MAX_CHARACTER_LEVEL
from dnd_sheet.models.enums import CasterArchetype
from dnd_sheet.models.spells import SpellSlotEntry, SpellSlots


# =============================================================================
# Tables
# =============================================================================

FULL_CASTER_SLOTS: dict[int, tuple[int, ...]] = {
    1: (2,),
    2: (3,),
    3: (4, 2),
    4: (4, 3),
    5: (4, 3, 2),
    6: (4, 3, 3),
    7: (4, 3, 3, 1),
    8: (4, 3, 3, 2),
    9: (4, 3, 3, 3, 1),
    10: (4, 3, 3, 3, 2),
    11: (4, 3, 3, 3, 2, 1),
    12: (4, 3, 3, 3, 2, 1),
    13: (4, 3, 3, 3, 2, 1, 1),
    14: (4, 3, 3, 3, 2, 1, 1),
    15: (4, 3, 3, 3, 2, 1, 1, 1),
    16: (4, 3, 3, 3, 2, 1, 1, 1),
    17: (4, 3, 3, 3, 2, 1, 1, 1, 1),
    18: (4, 3, 3, 3, 3, 1, 1, 1, 1),
    19: (4, 3, 3, 3, 3, 2, 1, 1, 1),
    20: (4, 3, 3, 3, 3, 2, 2, 1, 1),
}

HALF_CASTER_SLOTS: dict[int, tuple[int, ...]] = {
    1: (),
    2: (2,),
    3: (3,),
    4: (3,),
    5: (4, 2),
    6: (4, 2),
    7: (4, 3),
    8: (4, 3),
    9: (4, 3, 2),
    10: (4, 3, 2),
    11: (4, 3, 3),
    12: (4, 3, 3),
    13: (4, 3, 3, 1),
    14: (4, 3, 3, 1),
    15: (4, 3, 3, 2),
    16: (4, 3, 3, 2),
    17: (4, 3, 3, 3, 1),
    18: (4, 3, 3, 3, 1),
    19: (4, 3, 3, 3, 2),
    20: (4, 3, 3, 3, 2),
}

THIRD_CASTER_SLOTS: dict[int, tuple[int, ...]] = {
    1: (),
    2: (),
    3: (2,),
    4: (3,),
    5: (3,),
    6: (3,),
    7: (4, 2),
    8: (4, 2),
    9: (4, 2),
    10: (4, 3),
    11: (4, 3),
    12: (4, 3),
    13: (4, 3, 2),
    14: (4, 3, 2),
    15: (4, 3, 2),
    16: (4, 3, 3),
    17: (4, 3, 3),
    18: (4, 3, 3),
    19: (4, 3, 3, 1),
    20: (4, 3, 3, 1),
}

SLOT_TABLES = MappingProxyType(
    {
        CasterArchetype.FULL: FULL_CASTER_SLOTS,
        CasterArchetype.HALF: HALF_CASTER_SLOTS,
        CasterArchetype.THIRD: THIRD_CASTER_SLOTS,
    }
)

CLASS_ARCHETYPES = MappingProxyType(
    {
        "wizard": CasterArchetype.FULL,
        "sorcerer": CasterArchetype.FULL,
        "cleric": CasterArchetype.FULL,
        "druid": CasterArchetype.FULL,
        "bard": CasterArchetype.FULL,
        "paladin": CasterArchetype.HALF,
        "ranger": CasterArchetype.HALF,
        "artificer": CasterArchetype.HALF,
        "eldritch knight": CasterArchetype.THIRD,
        "arcane trickster": CasterArchetype.THIRD,
    }
)

ELDRITCH_KNIGHT_MARKERS = ("eldritch knight", "eldritch")
ARCANE_TRICKSTER_MARKERS = ("arcane trickster", "arcane", "trickster")


# =============================================================================
# Classification
# =============================================================================


def is_eldritch_knight(class_name: str, subclass_name: str) -> bool:
    subclass = (subclass_name or "").lower()
    return class_name.strip().lower() == "fighter" and any(m in subclass for m in ELDRITCH_KNIGHT_MARKERS)


def is_arcane_trickster(class_name: str, subclass_name: str) -> bool:
    subclass = (subclass_name or "").lower()
    return class_name.strip().lower() == "rogue" and any(m in subclass for m in ARCANE_TRICKSTER_MARKERS)


def classify(class_name: str, subclass_name: str = "") -> CasterArchetype:
    """Determine the caster archetype of a class and subclass.

    Fighters and Rogues are third casters only with a matching subclass
    (Eldritch Knight, Arcane Trickster). Unknown classes are non-casters.

    Args:
        class_name: Class name, any case.
        subclass_name: Subclass name, any case, may be empty.

    Returns:
        The caster archetype, NONE for non-casters.
    """
    normalized = (class_name or "").strip().lower()
    if normalized == "fighter":
        return CasterArchetype.THIRD if is_eldritch_knight(normalized, subclass_name) else CasterArchetype.NONE
    if normalized == "rogue":
        return CasterArchetype.THIRD if is_arcane_trickster(normalized, subclass_name) else CasterArchetype.NONE
    return CLASS_ARCHETYPES.get(normalized, CasterArchetype.NONE)


def slot_maxima(archetype: CasterArchetype, level: int) -> tuple[int, ...]:
    """Table row for an archetype and character level (clamped to 1-20)."""
    table = SLOT_TABLES.get(archetype)
    if table is None:
        return ()
    return table[max(1, min(level, MAX_CHARACTER_LEVEL))]


def default_slots(class_name: str, subclass_name: str, level: int) -> SpellSlots:
    """Fully rested default slots for a class, subclass and level.

    Example:
        >>> default_slots("Wizard", "", 5).max_for(3)
        2
    """
    row = slot_maxima(classify(class_name, subclass_name), level)
    return SpellSlots(
        {slot_level: SpellSlotEntry.full(maximum) for slot_level, maximum in enumerate(row, start=1) if maximum > 0}
    )


__all__ = [
    "FULL_CASTER_SLOTS",
    "HALF_CASTER_SLOTS",
    "THIRD_CASTER_SLOTS",
    "SLOT_TABLES",
    "CLASS_ARCHETYPES",
    "is_eldritch_knight",
    "is_arcane_trickster",
    "classify",
    "slot_maxima",
    "default_slots",
]
