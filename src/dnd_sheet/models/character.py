"""Pydantic V2 schemas for the character record consumed by the rules engine.

Only the parts of a character sheet the rules engine reads are modelled:
identity (class, subclass, level), ability scores, proficiency, the
weapons and feats quick rolls draw bonuses from, and the spellbook state.
Everything else on the sheet is owned by the consuming application.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dnd_sheet.core.constants import RANGED_WEAPON_MIN_RANGE
from dnd_sheet.core.exceptions import ValidationError
from dnd_sheet.models.enums import Ability
from dnd_sheet.models.spells import SpellbookState


AbilityScore = Annotated[int, Field(description="D&D ability score, conventionally 1-30")]


def ability_modifier(score: int) -> int:
    """Calculate the ability modifier for a score.

    Args:
        score: The ability score. Not clamped.

    Returns:
        floor((score - 10) / 2).
    """
    return (score - 10) // 2


class Abilities(BaseModel):
    """The six ability scores of a character.

    Documents use the short keys ('str', 'dex', ...) as aliases.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    strength: AbilityScore = Field(default=10, alias="str")
    dexterity: AbilityScore = Field(default=10, alias="dex")
    constitution: AbilityScore = Field(default=10, alias="con")
    intelligence: AbilityScore = Field(default=10, alias="int")
    wisdom: AbilityScore = Field(default=10, alias="wis")
    charisma: AbilityScore = Field(default=10, alias="cha")

    def score(self, ability: Ability) -> int:
        return getattr(self, ability.full_name.lower())

    def modifier(self, ability: Ability) -> int:
        return ability_modifier(self.score(ability))


class Identity(BaseModel):
    """Class, subclass and character level.

    Attributes:
        class_name: Class name as entered, e.g. 'Wizard'.
        subclass_name: Subclass name as entered, may be empty.
        level: Character level, 1 or higher.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    class_name: str = Field(default="", alias="class")
    subclass_name: str = Field(default="", alias="subClass")
    level: int = Field(default=1, ge=1)


class Weapon(BaseModel):
    """A weapon as seen by the quick-roll builders.

    Attributes:
        name: Display name.
        damage: Damage text; the first NdM group is rolled.
        properties: Weapon properties, e.g. ['finesse', 'light'].
        normal_range: Normal range in feet, None for melee weapons.
        attack_bonus: Magic or other flat attack bonus.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str
    damage: str = ""
    properties: tuple[str, ...] = ()
    normal_range: int | None = Field(default=None, alias="range")
    attack_bonus: int = Field(default=0, alias="attackBonus")

    @property
    def is_finesse(self) -> bool:
        return any(prop.lower() == "finesse" for prop in self.properties)

    @property
    def is_ranged(self) -> bool:
        return self.normal_range is not None and self.normal_range > RANGED_WEAPON_MIN_RANGE


class Feat(BaseModel):
    """A feat or feature; only the title is read by the rules engine."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    lines: tuple[str, ...] = ()


class CharacterRecord(BaseModel):
    """The rules-relevant slice of a persisted character document.

    Attributes:
        identity: Class, subclass and level.
        abilities: Ability scores.
        proficiency: Proficiency bonus.
        initiative_bonus: Flat initiative bonus on top of DEX.
        save_proficiencies: Abilities with saving throw proficiency.
        weapons: Weapons available for quick rolls.
        feats: Feats and features.
        spells: Spellbook state.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    identity: Identity = Field(default_factory=Identity)
    abilities: Abilities = Field(default_factory=Abilities)
    proficiency: int = Field(default=2, ge=0)
    initiative_bonus: int = Field(default=0)
    save_proficiencies: frozenset[Ability] = Field(default_factory=frozenset)
    weapons: tuple[Weapon, ...] = ()
    feats: tuple[Feat, ...] = ()
    spells: SpellbookState = Field(default_factory=SpellbookState)

    def to_document(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        document = self.model_dump(mode="json", by_alias=True)
        document["save_proficiencies"] = sorted(document["save_proficiencies"])
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> CharacterRecord:
        """Load a character from a persisted document.

        Raises:
            ValidationError: If the document does not describe a valid character.
        """
        try:
            return cls.model_validate(dict(document))
        except PydanticValidationError as exc:
            first = exc.errors()[0] if exc.errors() else {}
            field_name = ".".join(str(part) for part in first.get("loc", ()))
            raise ValidationError(
                f"Invalid character document: {first.get('msg', exc)}",
                field_name=field_name or None,
                details={"error_count": exc.error_count()},
            ) from exc


__all__ = [
    "AbilityScore",
    "ability_modifier",
    "Abilities",
    "Identity",
    "Weapon",
    "Feat",
    "CharacterRecord",
]
