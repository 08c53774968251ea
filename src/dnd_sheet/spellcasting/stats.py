"""Spellcasting statistics.

Spell save DC = 8 + proficiency + ability modifier, spell attack modifier
= proficiency + ability modifier. Either can be overridden by a stored
value. The spellcasting ability is, in order: the stored ability text when
it names an ability, the ability implied by the class, or the configured
fallback (Intelligence).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from dnd_sheet.core.config import get_settings
from dnd_sheet.core.constants import SPELL_SAVE_DC_BASE
from dnd_sheet.models.character import Abilities, Identity
from dnd_sheet.models.enums import Ability
from dnd_sheet.models.spells import SpellbookState
from dnd_sheet.spellcasting.slot_table import is_arcane_trickster, is_eldritch_knight


CLASS_ABILITIES = MappingProxyType(
    {
        "wizard": Ability.INT,
        "artificer": Ability.INT,
        "cleric": Ability.WIS,
        "druid": Ability.WIS,
        "ranger": Ability.WIS,
        "bard": Ability.CHA,
        "paladin": Ability.CHA,
        "sorcerer": Ability.CHA,
        "warlock": Ability.CHA,
    }
)


@dataclass(frozen=True)
class SpellcastingStats:
    """Derived spellcasting numbers for display.

    Attributes:
        ability: Resolved spellcasting ability.
        ability_modifier: Modifier of that ability.
        proficiency: Proficiency bonus.
        auto_spell_save_dc: 8 + proficiency + ability modifier.
        auto_spell_attack_modifier: proficiency + ability modifier.
        spell_save_dc: Override when set, otherwise the automatic DC.
        spell_attack_modifier: Override when set, otherwise automatic.
        has_spell_save_override: Whether a DC override is stored.
        has_spell_attack_override: Whether an attack override is stored.
    """

    ability: Ability
    ability_modifier: int
    proficiency: int
    auto_spell_save_dc: int
    auto_spell_attack_modifier: int
    spell_save_dc: int
    spell_attack_modifier: int
    has_spell_save_override: bool
    has_spell_attack_override: bool


def format_signed(value: int) -> str:
    """Format a modifier with its sign, e.g. '+3' or '-1'."""
    return f"+{value}" if value >= 0 else f"{value}"


def parse_spellcasting_ability(value: str | None) -> Ability | None:
    return Ability.parse(value)


def infer_spellcasting_ability(class_name: str, subclass_name: str = "") -> Ability | None:
    """Ability implied by a class, or None when the class implies none.

    Eldritch Knights and Arcane Tricksters cast with Intelligence.
    """
    normalized = (class_name or "").strip().lower()
    if normalized in CLASS_ABILITIES:
        return CLASS_ABILITIES[normalized]
    if is_eldritch_knight(normalized, subclass_name) or is_arcane_trickster(normalized, subclass_name):
        return Ability.INT
    return None


def resolve_spellcasting_ability(
    stored: str | None,
    class_name: str,
    subclass_name: str = "",
    *,
    fallback: Ability | None = None,
) -> Ability:
    """Resolve the spellcasting ability.

    Args:
        stored: Free-text ability saved on the character, may be None.
        class_name: Class name.
        subclass_name: Subclass name.
        fallback: Ability used when nothing else applies. Defaults to the
            configured fallback.

    Returns:
        The spellcasting ability.
    """
    parsed = parse_spellcasting_ability(stored)
    if parsed is not None:
        return parsed
    inferred = infer_spellcasting_ability(class_name, subclass_name)
    if inferred is not None:
        return inferred
    return fallback or get_settings().spellcasting.fallback_ability


def calculate_stats(
    ability: Ability,
    ability_modifier: int,
    proficiency: int,
    *,
    save_dc_override: int | None = None,
    attack_override: int | None = None,
) -> SpellcastingStats:
    """Build spellcasting statistics from a resolved ability modifier."""
    auto_dc = SPELL_SAVE_DC_BASE + proficiency + ability_modifier
    auto_attack = proficiency + ability_modifier
    return SpellcastingStats(
        ability=ability,
        ability_modifier=ability_modifier,
        proficiency=proficiency,
        auto_spell_save_dc=auto_dc,
        auto_spell_attack_modifier=auto_attack,
        spell_save_dc=save_dc_override if save_dc_override is not None else auto_dc,
        spell_attack_modifier=attack_override if attack_override is not None else auto_attack,
        has_spell_save_override=save_dc_override is not None,
        has_spell_attack_override=attack_override is not None,
    )


def stats_for(
    identity: Identity,
    abilities: Abilities,
    proficiency: int,
    state: SpellbookState,
    *,
    fallback: Ability | None = None,
) -> SpellcastingStats:
    """Spellcasting statistics for a character's identity and spellbook."""
    ability = resolve_spellcasting_ability(
        state.spellcasting_ability,
        identity.class_name,
        identity.subclass_name,
        fallback=fallback,
    )
    return calculate_stats(
        ability,
        abilities.modifier(ability),
        proficiency,
        save_dc_override=state.spell_save_dc_override,
        attack_override=state.spell_attack_override,
    )


__all__ = [
    "CLASS_ABILITIES",
    "SpellcastingStats",
    "format_signed",
    "parse_spellcasting_ability",
    "infer_spellcasting_ability",
    "resolve_spellcasting_ability",
    "calculate_stats",
    "stats_for",
]
