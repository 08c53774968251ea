"""Data models for the character sheet engine.

Submodules:
    enums: Ability keys, caster archetypes, roll modes, transition states.
    spells: Spell slot entries, slot mappings and persisted spellbook state.
    character: Identity, ability scores, weapons, feats and the character record.
"""

from __future__ import annotations

from dnd_sheet.models.character import (
    Abilities,
    AbilityScore,
    CharacterRecord,
    Feat,
    Identity,
    Weapon,
    ability_modifier,
)
from dnd_sheet.models.enums import (
    Ability,
    CasterArchetype,
    ConfirmationChoice,
    RollMode,
    SlotField,
    TransitionKind,
    TransitionState,
)
from dnd_sheet.models.spells import (
    MAX_SLOT_LEVEL,
    MIN_SLOT_LEVEL,
    SLOT_LEVELS,
    SlotLevel,
    SpellbookState,
    SpellSlotEntry,
    SpellSlots,
    is_slot_level,
)


__all__ = [
    # Enums
    "Ability",
    "CasterArchetype",
    "ConfirmationChoice",
    "RollMode",
    "SlotField",
    "TransitionKind",
    "TransitionState",
    # Spell state
    "MIN_SLOT_LEVEL",
    "MAX_SLOT_LEVEL",
    "SLOT_LEVELS",
    "SlotLevel",
    "is_slot_level",
    "SpellSlotEntry",
    "SpellSlots",
    "SpellbookState",
    # Character
    "AbilityScore",
    "ability_modifier",
    "Abilities",
    "Identity",
    "Weapon",
    "Feat",
    "CharacterRecord",
]
