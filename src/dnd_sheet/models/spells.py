"""Pydantic V2 schemas for spell slot and spellbook state.

All models here are frozen: every mutation produces a new instance that
replaces the old one wholesale, so derived views never observe a
half-applied update.

Slot levels are constrained to 1-9. Cantrips never consume slots and have
no entry. Levels with no slots are absent rather than present-with-zero.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_validator,
)


MIN_SLOT_LEVEL = 1
MAX_SLOT_LEVEL = 9
SLOT_LEVELS: tuple[int, ...] = tuple(range(MIN_SLOT_LEVEL, MAX_SLOT_LEVEL + 1))

SlotLevel = Annotated[int, Field(ge=MIN_SLOT_LEVEL, le=MAX_SLOT_LEVEL, description="Spell slot level (1-9)")]


def is_slot_level(level: object) -> bool:
    """Check whether a value is a valid spell slot level."""
    return isinstance(level, int) and not isinstance(level, bool) and MIN_SLOT_LEVEL <= level <= MAX_SLOT_LEVEL


class SpellSlotEntry(BaseModel):
    """Current and maximum slots for one spell level.

    Out-of-range input is clamped on construction rather than rejected:
    negatives become zero and ``current`` is capped at ``max``.

    Attributes:
        current: Slots still available.
        max: Slots available after a long rest.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    current: int = Field(default=0, ge=0, description="Slots remaining")
    max: int = Field(default=0, ge=0, description="Slot maximum")

    @model_validator(mode="before")
    @classmethod
    def clamp_values(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        clamped = dict(data)
        maximum = max(0, int(clamped.get("max", 0) or 0))
        current = max(0, int(clamped.get("current", 0) or 0))
        clamped["max"] = maximum
        clamped["current"] = min(current, maximum)
        return clamped

    @classmethod
    def full(cls, maximum: int) -> SpellSlotEntry:
        """Create a fully rested entry."""
        return cls(current=maximum, max=maximum)

    @property
    def is_full(self) -> bool:
        return self.current >= self.max

    @property
    def is_empty(self) -> bool:
        return self.current <= 0


class SpellSlots(RootModel[dict[SlotLevel, SpellSlotEntry]]):
    """Partial mapping of spell level to slot entry.

    Example:
        >>> slots = SpellSlots({1: SpellSlotEntry.full(4), 2: SpellSlotEntry.full(3)})
        >>> slots.max_for(2)
        3
    """

    model_config = ConfigDict(frozen=True)

    root: dict[SlotLevel, SpellSlotEntry] = Field(default_factory=dict)

    def get(self, level: int) -> SpellSlotEntry | None:
        return self.root.get(level)

    def max_for(self, level: int) -> int:
        """Slot maximum for a level, zero when the level is absent."""
        entry = self.root.get(level)
        return entry.max if entry else 0

    def current_for(self, level: int) -> int:
        entry = self.root.get(level)
        return entry.current if entry else 0

    def levels(self) -> list[int]:
        """Present levels in ascending order."""
        return sorted(self.root)

    def items(self) -> Iterator[tuple[int, SpellSlotEntry]]:
        for level in self.levels():
            yield level, self.root[level]

    def with_entry(self, level: int, entry: SpellSlotEntry) -> SpellSlots:
        """Return a copy with one level replaced."""
        return SpellSlots({**self.root, level: entry})

    def __contains__(self, level: object) -> bool:
        return level in self.root

    def __len__(self) -> int:
        return len(self.root)

    def __bool__(self) -> bool:
        return bool(self.root)


class SpellbookState(BaseModel):
    """Persisted spellcasting state of one character.

    ``prepared`` is always a subset of ``known``: names that are not known
    are dropped when the state is built.

    Attributes:
        slots: Stored slot entries; levels absent here fall back to the
            class defaults.
        known: Spell names the character has learned.
        prepared: Known spell names currently prepared.
        spellcasting_ability: Free-text ability override, e.g. 'Wisdom'.
        spell_save_dc_override: Manual spell save DC, or None for automatic.
        spell_attack_override: Manual spell attack modifier, or None.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    slots: SpellSlots = Field(default_factory=SpellSlots)
    known: frozenset[str] = Field(default_factory=frozenset)
    prepared: frozenset[str] = Field(default_factory=frozenset)
    spellcasting_ability: str | None = Field(default=None)
    spell_save_dc_override: int | None = Field(default=None)
    spell_attack_override: int | None = Field(default=None)

    @field_validator("known", "prepared", mode="before")
    @classmethod
    def drop_blank_names(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(name for name in value if isinstance(name, str) and name)
        return value

    @field_validator("prepared", mode="after")
    @classmethod
    def prepared_must_be_known(cls, value: frozenset[str], info: ValidationInfo) -> frozenset[str]:
        known = info.data.get("known", frozenset())
        return value & known

    @field_serializer("known", "prepared")
    def serialize_names(self, names: frozenset[str]) -> list[str]:
        return sorted(names)

    def to_document(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        return self.model_dump(mode="json")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> SpellbookState:
        """Build state from a persisted document.

        Raises:
            pydantic.ValidationError: If the document is malformed. Callers at
                the persistence boundary wrap this; see CharacterRecord.
        """
        return cls.model_validate(dict(document))


__all__ = [
    "MIN_SLOT_LEVEL",
    "MAX_SLOT_LEVEL",
    "SLOT_LEVELS",
    "SlotLevel",
    "is_slot_level",
    "SpellSlotEntry",
    "SpellSlots",
    "SpellbookState",
]
