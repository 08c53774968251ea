"""Enumeration types for the character sheet engine.

This module defines the enumerations shared by the dice pipeline and the
spellcasting rules: ability keys, caster archetypes, roll modes and the
states and choices of the class/level change detector.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six D&D 5E ability scores, keyed by their short names."""

    STR = "str"
    DEX = "dex"
    CON = "con"
    INT = "int"
    WIS = "wis"
    CHA = "cha"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability (e.g. 'Strength')."""
        return _FULL_NAMES[self]

    @property
    def label(self) -> str:
        """Get the upper-case display label (e.g. 'STR')."""
        return self.name

    @classmethod
    def parse(cls, value: str | None) -> Ability | None:
        """Fuzzy-parse a free-text ability name.

        Matches by substring against both the abbreviated and the full
        name, checked in STR, DEX, CON, INT, WIS, CHA order, so
        'Intelligence', 'int' and 'INT (Wizard)' all resolve to INT.

        Args:
            value: Free text such as a stored spellcasting ability.

        Returns:
            The matching Ability, or None if nothing matches.
        """
        normalized = (value or "").strip().lower()
        if not normalized:
            return None

        for ability in cls:
            if ability.value in normalized or ability.full_name.lower() in normalized:
                return ability
        return None


_FULL_NAMES: dict[Ability, str] = {
    Ability.STR: "Strength",
    Ability.DEX: "Dexterity",
    Ability.CON: "Constitution",
    Ability.INT: "Intelligence",
    Ability.WIS: "Wisdom",
    Ability.CHA: "Charisma",
}


class CasterArchetype(StrEnum):
    """How many spell slots a class grants per character level."""

    NONE = "none"
    FULL = "full"
    HALF = "half"
    THIRD = "third"

    @property
    def is_caster(self) -> bool:
        return self is not CasterArchetype.NONE


class RollMode(StrEnum):
    """Roll mode for a dice request."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"

    @property
    def short_label(self) -> str:
        """Short tag used in roll traces ('adv' / 'dis')."""
        if self is RollMode.ADVANTAGE:
            return "adv"
        if self is RollMode.DISADVANTAGE:
            return "dis"
        return ""


class SlotField(StrEnum):
    """Editable fields of a spell slot entry."""

    CURRENT = "current"
    MAX = "max"


class TransitionState(StrEnum):
    """States of the class/level change detector."""

    STABLE = "stable"
    PENDING_CASTER_TYPE_CONFIRMATION = "pending_caster_type_confirmation"
    PENDING_SLOT_DIRTY_CONFIRMATION = "pending_slot_dirty_confirmation"


class TransitionKind(StrEnum):
    """What an identity or edit-mode change does to spell state."""

    NONE = "none"
    """Nothing to apply."""

    RECOMPUTE_DEFAULTS = "recompute_defaults"
    """Class changed within the same caster archetype: slots reset to defaults."""

    RESCALE_LEVEL = "rescale_level"
    """Level changed: new maxima, current preserved up to the new max."""

    CONFIRM_CASTER_CHANGE = "confirm_caster_change"
    """Caster archetype changed: user must choose Reset or Keep."""

    CONFIRM_DIRTY_SLOTS = "confirm_dirty_slots"
    """Edit session ended with non-default slots: user must choose Discard or Keep."""


class ConfirmationChoice(StrEnum):
    """User answers to a pending confirmation."""

    RESET = "reset"
    KEEP = "keep"
    DISCARD = "discard"


__all__ = [
    "Ability",
    "CasterArchetype",
    "RollMode",
    "SlotField",
    "TransitionState",
    "TransitionKind",
    "ConfirmationChoice",
]
