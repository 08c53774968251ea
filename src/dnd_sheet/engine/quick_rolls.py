"""Quick-roll request builders.

Each builder reads a character record and returns the notation, flat bonus
and label of a common roll (ability check, save, initiative, weapon attack
and damage). Rolling the request is left to ``DiceRoller``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dnd_sheet.core.constants import ALERT_INITIATIVE_BONUS
from dnd_sheet.models.character import CharacterRecord, Weapon
from dnd_sheet.models.enums import Ability


D20 = "1d20"
WEAPON_DAMAGE_PATTERN = re.compile(r"(\d+)d(\d+)")


@dataclass(frozen=True)
class QuickRoll:
    """A prepared roll request.

    Attributes:
        notation: Dice notation without the bonus, e.g. '1d20'.
        bonus: Flat bonus added to the roll.
        label: Label shown in the roll trace, e.g. 'DEX Save'.
    """

    notation: str
    bonus: int
    label: str

    @property
    def full_notation(self) -> str:
        """Notation with the bonus folded in, e.g. '1d20+5'."""
        if self.bonus == 0:
            return self.notation
        return f"{self.notation}{self.bonus:+d}"


def ability_check(character: CharacterRecord, ability: Ability) -> QuickRoll:
    return QuickRoll(D20, character.abilities.modifier(ability), ability.label)


def saving_throw(character: CharacterRecord, ability: Ability) -> QuickRoll:
    """Saving throw, adding proficiency when the character is proficient."""
    bonus = character.abilities.modifier(ability)
    if ability in character.save_proficiencies:
        bonus += character.proficiency
    return QuickRoll(D20, bonus, f"{ability.label} Save")


def has_alert(character: CharacterRecord) -> bool:
    return any("alert" in feat.title.lower() for feat in character.feats)


def initiative(character: CharacterRecord) -> QuickRoll:
    """Initiative: DEX modifier, flat initiative bonus, +5 with the Alert feat."""
    bonus = character.abilities.modifier(Ability.DEX) + character.initiative_bonus
    if has_alert(character):
        bonus += ALERT_INITIATIVE_BONUS
    return QuickRoll(D20, bonus, "Initiative")


def weapon_ability_modifier(character: CharacterRecord, weapon: Weapon) -> int:
    """Ability modifier a weapon attacks with.

    Finesse weapons use the better of STR and DEX, ranged weapons use DEX,
    everything else uses STR.
    """
    abilities = character.abilities
    if weapon.is_finesse:
        return max(abilities.modifier(Ability.STR), abilities.modifier(Ability.DEX))
    if weapon.is_ranged:
        return abilities.modifier(Ability.DEX)
    return abilities.modifier(Ability.STR)


def weapon_attack(character: CharacterRecord, weapon: Weapon) -> QuickRoll:
    bonus = weapon_ability_modifier(character, weapon) + character.proficiency + weapon.attack_bonus
    return QuickRoll(D20, bonus, f"{weapon.name} Attack")


def weapon_damage(character: CharacterRecord, weapon: Weapon) -> QuickRoll | None:
    """Damage roll for the first NdM group in the weapon's damage text.

    Returns:
        The request, or None when the damage text holds no dice.
    """
    match = WEAPON_DAMAGE_PATTERN.search(weapon.damage)
    if not match:
        return None
    notation = f"{int(match.group(1))}d{int(match.group(2))}"
    return QuickRoll(notation, weapon_ability_modifier(character, weapon), f"{weapon.name} Damage")


__all__ = [
    "QuickRoll",
    "ability_check",
    "saving_throw",
    "has_alert",
    "initiative",
    "weapon_ability_modifier",
    "weapon_attack",
    "weapon_damage",
]
