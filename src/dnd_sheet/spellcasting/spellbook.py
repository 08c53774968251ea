"""Spellbook aggregate.

Composes the slot manager, the known/prepared tracker, the statistics
calculator and the change detector around one character's spellbook
state, so a UI layer has a single object to call after each user action.

Example:
    >>> book = Spellbook(Identity(class_name="Wizard", level=5), Abilities(int=16), proficiency=3)
    >>> book.stats.spell_save_dc
    14
    >>> book.update_identity(Identity(class_name="Fighter", level=5)).kind
    <TransitionKind.CONFIRM_CASTER_CHANGE: 'confirm_caster_change'>
    >>> book.resolve_pending("reset").clear_prepared
    True
"""

from __future__ import annotations

from dnd_sheet.core.config import Settings, get_settings
from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import Abilities, CharacterRecord, Identity
from dnd_sheet.models.enums import ConfirmationChoice, SlotField, TransitionState
from dnd_sheet.models.spells import SpellbookState, SpellSlots
from dnd_sheet.spellcasting.known import KnownSpellTracker
from dnd_sheet.spellcasting.slots import SlotDirtiness, SpellSlotManager
from dnd_sheet.spellcasting.stats import SpellcastingStats, stats_for
from dnd_sheet.spellcasting.transitions import (
    Resolution,
    TransitionDecision,
    detect_transition,
    resolve_confirmation,
)


logger = get_logger(__name__)


class Spellbook:
    """Spellcasting state of one character and the operations on it.

    Attributes:
        abilities: Ability scores used for the spellcasting modifier.
        proficiency: Proficiency bonus.
    """

    def __init__(
        self,
        identity: Identity,
        abilities: Abilities,
        proficiency: int,
        state: SpellbookState | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        state = state or SpellbookState()
        settings = settings or get_settings()

        self.abilities = abilities
        self.proficiency = proficiency
        self._fallback_ability = settings.spellcasting.fallback_ability
        self._slots = SpellSlotManager(identity, state.slots)
        self._spells = KnownSpellTracker(state.known, state.prepared)
        self._spellcasting_ability = state.spellcasting_ability
        self._save_dc_override = state.spell_save_dc_override
        self._attack_override = state.spell_attack_override
        self._editing = False
        self._pending: TransitionDecision | None = None

    @classmethod
    def from_record(cls, record: CharacterRecord, *, settings: Settings | None = None) -> Spellbook:
        return cls(record.identity, record.abilities, record.proficiency, record.spells, settings=settings)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def identity(self) -> Identity:
        return self._slots.identity

    @property
    def state(self) -> SpellbookState:
        """Snapshot of the persisted spellbook state."""
        return SpellbookState(
            slots=self._slots.slots,
            known=self._spells.known,
            prepared=self._spells.prepared,
            spellcasting_ability=self._spellcasting_ability,
            spell_save_dc_override=self._save_dc_override,
            spell_attack_override=self._attack_override,
        )

    @property
    def transition_state(self) -> TransitionState:
        return self._pending.state if self._pending else TransitionState.STABLE

    @property
    def pending(self) -> TransitionDecision | None:
        return self._pending

    @property
    def is_editing(self) -> bool:
        return self._editing

    @property
    def stats(self) -> SpellcastingStats:
        return stats_for(
            self.identity,
            self.abilities,
            self.proficiency,
            self.state,
            fallback=self._fallback_ability,
        )

    @property
    def counts(self) -> tuple[int, int]:
        """(known, prepared) spell counts."""
        return self._spells.counts

    # -------------------------------------------------------------------------
    # Slots
    # -------------------------------------------------------------------------

    def current_slots(self) -> SpellSlots:
        return self._slots.current_slots()

    def update_slot(self, level: int, field: SlotField | str, value: int) -> SpellSlots:
        return self._slots.update_slot(level, field, value)

    def spend_slot(self, level: int) -> SpellSlots:
        return self._slots.spend_slot(level)

    def restore_slot(self, level: int) -> SpellSlots:
        return self._slots.restore_slot(level)

    def long_rest(self) -> SpellSlots:
        return self._slots.long_rest()

    def reset_to_default(self) -> SpellSlots:
        return self._slots.reset_to_default()

    def compute_dirtiness(self) -> SlotDirtiness:
        return self._slots.compute_dirtiness()

    # -------------------------------------------------------------------------
    # Known / Prepared
    # -------------------------------------------------------------------------

    def toggle_known(self, name: str) -> bool:
        return self._spells.toggle_known(name)

    def toggle_prepared(self, name: str) -> bool:
        return self._spells.toggle_prepared(name)

    def is_known(self, name: str) -> bool:
        return self._spells.is_known(name)

    def is_prepared(self, name: str) -> bool:
        return self._spells.is_prepared(name)

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    def set_spellcasting_ability(self, value: str | None) -> None:
        self._spellcasting_ability = value or None

    def set_spell_save_dc_override(self, value: int | None) -> None:
        self._save_dc_override = value

    def reset_spell_save_dc_override(self) -> None:
        self._save_dc_override = None

    def set_spell_attack_override(self, value: int | None) -> None:
        self._attack_override = value

    def reset_spell_attack_override(self) -> None:
        self._attack_override = None

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def update_identity(self, identity: Identity) -> TransitionDecision:
        """Change class, subclass or level and apply what follows from it.

        Immediate changes (same-archetype class change, level change) are
        applied to the slots before returning. A caster archetype change is
        left pending until ``resolve_pending``.
        """
        decision = detect_transition(
            self.identity,
            identity,
            self._slots.slots,
            was_editing=self._editing,
            is_editing=self._editing,
        )
        self._slots.identity = identity
        self._apply(decision)
        return decision

    def set_edit_mode(self, editing: bool) -> TransitionDecision:
        """Enter or leave edit mode.

        Leaving edit mode with slot maxima that differ from the defaults
        asks for confirmation, unless a caster change is already pending.
        """
        was_editing, self._editing = self._editing, editing
        if self._pending is not None:
            return self._pending
        decision = detect_transition(
            self.identity,
            self.identity,
            self._slots.slots,
            was_editing=was_editing,
            is_editing=editing,
        )
        self._apply(decision)
        return decision

    def resolve_pending(self, choice: ConfirmationChoice | str) -> Resolution:
        """Answer the pending confirmation and return to STABLE.

        Raises:
            InvalidStateTransitionError: If nothing is pending or the choice
                does not answer the pending question.
        """
        resolution = resolve_confirmation(self.transition_state, choice, self.identity)
        if resolution.slots is not None:
            self._slots.slots = resolution.slots
        if resolution.clear_prepared:
            self._spells.clear_prepared()
        self._pending = None
        return resolution

    def _apply(self, decision: TransitionDecision) -> None:
        if decision.is_pending:
            if self._pending is not None:
                logger.debug("Replacing pending confirmation", previous=self._pending.kind, current=decision.kind)
            self._pending = decision
        elif decision.slots is not None:
            self._slots.slots = decision.slots


__all__ = [
    "Spellbook",
]
