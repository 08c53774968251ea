"""Tests for spell slot, spellbook and character schemas."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dnd_sheet.core.exceptions import ValidationError
from dnd_sheet.models.character import Abilities, CharacterRecord, ability_modifier
from dnd_sheet.models.enums import Ability
from dnd_sheet.models.spells import SpellbookState, SpellSlotEntry, SpellSlots, is_slot_level


class TestAbilityModifier:
    """Tests for the ability modifier formula."""

    @pytest.mark.parametrize(("score", "expected"), [(10, 0), (17, 3), (8, -1), (1, -5), (30, 10)])
    def test_known_values(self, score: int, expected: int) -> None:
        """Test reference modifiers."""
        assert ability_modifier(score) == expected

    @given(st.integers(min_value=-50, max_value=50))
    def test_floor_formula(self, score: int) -> None:
        """Property: modifier is floor((score - 10) / 2)."""
        modifier = ability_modifier(score)
        assert 2 * modifier <= score - 10 < 2 * modifier + 2

    def test_abilities_by_short_key(self) -> None:
        """Test that documents use short ability keys."""
        abilities = Abilities.model_validate({"int": 18, "dex": 9})

        assert abilities.score(Ability.INT) == 18
        assert abilities.modifier(Ability.DEX) == -1
        assert abilities.score(Ability.STR) == 10


class TestAbilityParse:
    """Tests for fuzzy ability parsing."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Intelligence", Ability.INT),
            ("wis", Ability.WIS),
            ("CHA (Sorcerer)", Ability.CHA),
            ("  Dexterity ", Ability.DEX),
            ("", None),
            (None, None),
            ("luck", None),
        ],
    )
    def test_parse(self, text: str | None, expected: Ability | None) -> None:
        """Test full, abbreviated and unknown names."""
        assert Ability.parse(text) is expected

    def test_labels(self) -> None:
        """Test display helpers."""
        assert Ability.STR.label == "STR"
        assert Ability.WIS.full_name == "Wisdom"


class TestSpellSlotEntry:
    """Tests for SpellSlotEntry clamping."""

    def test_current_capped_at_max(self) -> None:
        """Test that current never exceeds max."""
        assert SpellSlotEntry(current=5, max=3) == SpellSlotEntry(current=3, max=3)

    def test_negatives_clamped(self) -> None:
        """Test that negative values become zero."""
        entry = SpellSlotEntry(current=-2, max=-1)

        assert (entry.current, entry.max) == (0, 0)
        assert entry.is_empty
        assert entry.is_full

    def test_frozen(self) -> None:
        """Test that entries cannot be edited in place."""
        entry = SpellSlotEntry.full(2)

        with pytest.raises(ValueError):
            entry.current = 1  # type: ignore[misc]


class TestSpellSlots:
    """Tests for the SpellSlots mapping."""

    def test_lookup_helpers(self) -> None:
        """Test max/current lookups with absent levels."""
        slots = SpellSlots({1: SpellSlotEntry.full(4), 3: SpellSlotEntry(current=1, max=2)})

        assert slots.max_for(1) == 4
        assert slots.current_for(3) == 1
        assert slots.max_for(2) == 0
        assert slots.levels() == [1, 3]
        assert 3 in slots
        assert len(slots) == 2

    def test_with_entry_copies(self) -> None:
        """Test that with_entry leaves the original untouched."""
        slots = SpellSlots({1: SpellSlotEntry.full(2)})

        updated = slots.with_entry(2, SpellSlotEntry.full(1))

        assert 2 not in slots
        assert updated.max_for(2) == 1

    @pytest.mark.parametrize("level", [0, 10, -1])
    def test_level_out_of_range_rejected(self, level: int) -> None:
        """Test that slot levels are limited to 1-9."""
        with pytest.raises(ValueError):
            SpellSlots.model_validate({level: {"current": 1, "max": 1}})

    def test_is_slot_level(self) -> None:
        """Test the slot level predicate."""
        assert is_slot_level(1)
        assert is_slot_level(9)
        assert not is_slot_level(0)
        assert not is_slot_level(True)
        assert not is_slot_level("3")


class TestSpellbookState:
    """Tests for SpellbookState."""

    def test_prepared_subset_of_known(self) -> None:
        """Test that unknown names are dropped from prepared."""
        state = SpellbookState(known=["Shield"], prepared=["Shield", "Fireball"])

        assert state.prepared == frozenset({"Shield"})

    def test_blank_names_dropped(self) -> None:
        """Test that empty names are ignored."""
        state = SpellbookState(known=["", "Light"], prepared=[""])

        assert state.known == frozenset({"Light"})
        assert state.prepared == frozenset()

    def test_document_round_trip(self) -> None:
        """Test that state survives serialization to plain types."""
        state = SpellbookState(
            slots=SpellSlots({1: SpellSlotEntry(current=2, max=4), 3: SpellSlotEntry.full(2)}),
            known=["Shield", "Fireball", "Counterspell"],
            prepared=["Fireball", "Shield"],
            spellcasting_ability="Intelligence",
            spell_save_dc_override=15,
        )

        document = state.to_document()

        assert document["known"] == ["Counterspell", "Fireball", "Shield"]
        assert document["slots"]["1"] == {"current": 2, "max": 4}
        assert SpellbookState.from_document(document) == state


class TestCharacterRecord:
    """Tests for CharacterRecord documents."""

    def test_loads_aliases(self, sample_character_data: dict[str, Any]) -> None:
        """Test loading a document with camelCase and short keys."""
        record = CharacterRecord.from_document(sample_character_data)

        assert record.identity.class_name == "Wizard"
        assert record.identity.subclass_name == "School of Evocation"
        assert record.abilities.intelligence == 17
        assert record.save_proficiencies == frozenset({Ability.INT, Ability.WIS})
        assert record.spells.slots.current_for(1) == 3
        assert record.weapons[1].is_ranged

    def test_round_trip(self, sample_character_data: dict[str, Any]) -> None:
        """Test that a record survives a document round trip."""
        record = CharacterRecord.from_document(sample_character_data)

        document = record.to_document()

        assert document["identity"]["class"] == "Wizard"
        assert document["save_proficiencies"] == ["int", "wis"]
        assert CharacterRecord.from_document(document) == record

    def test_invalid_document(self, sample_character_data: dict[str, Any]) -> None:
        """Test that malformed documents raise the engine's ValidationError."""
        sample_character_data["identity"]["level"] = 0

        with pytest.raises(ValidationError) as exc_info:
            CharacterRecord.from_document(sample_character_data)

        assert exc_info.value.details["field_name"] == "identity.level"
