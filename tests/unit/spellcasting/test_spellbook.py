"""Tests for the Spellbook aggregate."""

from __future__ import annotations

import pytest

from dnd_sheet.core.config import Settings
from dnd_sheet.core.exceptions import InvalidStateTransitionError
from dnd_sheet.models.character import Abilities, CharacterRecord, Identity
from dnd_sheet.models.enums import Ability, TransitionKind, TransitionState
from dnd_sheet.models.spells import SpellbookState, SpellSlotEntry, SpellSlots
from dnd_sheet.spellcasting.spellbook import Spellbook


@pytest.fixture
def wizard_book() -> Spellbook:
    """Provide a level 5 wizard with two prepared spells."""
    state = SpellbookState(known={"Shield", "Fireball", "Light"}, prepared={"Shield", "Fireball"})
    return Spellbook(Identity(class_name="Wizard", level=5), Abilities(int=16), 3, state)


class TestSpellbookStats:
    """Tests for derived statistics."""

    def test_automatic_stats(self, wizard_book: Spellbook) -> None:
        """Test the DC and attack for INT 16 and proficiency 3."""
        assert wizard_book.stats.ability is Ability.INT
        assert wizard_book.stats.spell_save_dc == 14
        assert wizard_book.stats.spell_attack_modifier == 6

    def test_overrides_round_trip(self, wizard_book: Spellbook) -> None:
        """Test setting and clearing overrides."""
        wizard_book.set_spell_save_dc_override(17)
        wizard_book.set_spell_attack_override(9)
        assert wizard_book.stats.spell_save_dc == 17
        assert wizard_book.stats.spell_attack_modifier == 9

        wizard_book.reset_spell_save_dc_override()
        wizard_book.reset_spell_attack_override()
        assert wizard_book.stats.spell_save_dc == 14
        assert not wizard_book.stats.has_spell_attack_override

    def test_stored_ability(self, wizard_book: Spellbook) -> None:
        """Test a stored spellcasting ability override."""
        wizard_book.set_spellcasting_ability("Charisma")

        assert wizard_book.stats.ability is Ability.CHA
        assert wizard_book.state.spellcasting_ability == "Charisma"

        wizard_book.set_spellcasting_ability("")
        assert wizard_book.state.spellcasting_ability is None

    def test_settings_fallback(self) -> None:
        """Test that the configured fallback applies to non-casters."""
        settings = Settings(spellcasting={"fallback_ability": "wis"})

        book = Spellbook(Identity(class_name="Monk", level=3), Abilities(wis=14), 2, settings=settings)

        assert book.stats.ability is Ability.WIS


class TestSpellbookTransitions:
    """Tests for identity and edit-mode changes."""

    def test_caster_change_reset(self, wizard_book: Spellbook) -> None:
        """Test Wizard to Fighter answered with Reset."""
        decision = wizard_book.update_identity(Identity(class_name="Fighter", level=5))

        assert decision.kind is TransitionKind.CONFIRM_CASTER_CHANGE
        assert wizard_book.transition_state is TransitionState.PENDING_CASTER_TYPE_CONFIRMATION

        resolution = wizard_book.resolve_pending("reset")

        assert resolution.clear_prepared is True
        assert wizard_book.transition_state is TransitionState.STABLE
        assert wizard_book.state.slots == SpellSlots()
        assert wizard_book.counts == (3, 0)

    def test_caster_change_keep(self, wizard_book: Spellbook) -> None:
        """Test that Keep preserves prepared spells."""
        wizard_book.update_identity(Identity(class_name="Paladin", level=5))

        wizard_book.resolve_pending("keep")

        assert wizard_book.counts == (3, 2)
        assert wizard_book.state.slots.max_for(1) == 4
        assert wizard_book.state.slots.max_for(3) == 0

    def test_level_up_applies_immediately(self, wizard_book: Spellbook) -> None:
        """Test that a level change rescales without confirmation."""
        wizard_book.spend_slot(3)

        decision = wizard_book.update_identity(Identity(class_name="Wizard", level=7))

        assert decision.kind is TransitionKind.RESCALE_LEVEL
        assert wizard_book.pending is None
        assert wizard_book.state.slots.get(3) == SpellSlotEntry(current=1, max=3)
        assert wizard_book.state.slots.get(4) == SpellSlotEntry(current=0, max=1)

    def test_dirty_slots_discard(self, wizard_book: Spellbook) -> None:
        """Test leaving edit mode with non-default slots."""
        assert wizard_book.set_edit_mode(True).kind is TransitionKind.NONE
        wizard_book.update_slot(2, "max", 4)

        decision = wizard_book.set_edit_mode(False)

        assert decision.kind is TransitionKind.CONFIRM_DIRTY_SLOTS
        assert decision.changes == ("Level 2: 4 slots (default: 3)",)

        wizard_book.resolve_pending("discard")

        assert not wizard_book.compute_dirtiness().is_dirty
        assert wizard_book.transition_state is TransitionState.STABLE

    def test_dirty_slots_keep(self, wizard_book: Spellbook) -> None:
        """Test that Keep leaves edited slots in place."""
        wizard_book.set_edit_mode(True)
        wizard_book.update_slot(1, "max", 6)
        wizard_book.set_edit_mode(False)

        wizard_book.resolve_pending("keep")

        assert wizard_book.current_slots().max_for(1) == 6
        assert wizard_book.compute_dirtiness().is_dirty

    def test_pending_caster_change_wins_over_dirty(self, wizard_book: Spellbook) -> None:
        """Test that leaving edit mode keeps the caster confirmation."""
        wizard_book.set_edit_mode(True)
        wizard_book.update_slot(2, "max", 4)
        wizard_book.update_identity(Identity(class_name="Barbarian", level=5))

        decision = wizard_book.set_edit_mode(False)

        assert decision.kind is TransitionKind.CONFIRM_CASTER_CHANGE
        assert not wizard_book.is_editing

    def test_resolve_without_pending(self, wizard_book: Spellbook) -> None:
        """Test that resolving in STABLE raises."""
        with pytest.raises(InvalidStateTransitionError):
            wizard_book.resolve_pending("keep")


class TestSpellbookRecord:
    """Tests for loading from a character record."""

    def test_from_record(self, sample_character: CharacterRecord) -> None:
        """Test that a record's spellbook state is picked up."""
        book = Spellbook.from_record(sample_character)

        assert book.counts == (3, 2)
        assert book.is_prepared("Shield")
        assert book.current_slots().get(1) == SpellSlotEntry(current=3, max=4)
        assert book.current_slots().get(3) == SpellSlotEntry.full(2)
        assert book.stats.spell_save_dc == 14

    def test_toggles_flow_into_state(self, sample_character: CharacterRecord) -> None:
        """Test that known/prepared toggles show in the snapshot."""
        book = Spellbook.from_record(sample_character)

        book.toggle_prepared("Fireball")
        book.toggle_known("Shield")

        assert book.state.known == frozenset({"Fireball", "Magic Missile"})
        assert book.state.prepared == frozenset({"Fireball", "Magic Missile"})
        assert not book.is_known("Shield")
