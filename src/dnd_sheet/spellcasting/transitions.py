"""Class and level change detection.

Callers invoke ``detect_transition`` after every identity or edit-mode
change with the identity before and after. The decision says whether the
change applies immediately (new slots) or waits for a user choice:

* Caster archetype changed: PENDING_CASTER_TYPE_CONFIRMATION, resolved by
  RESET (defaults, prepared cleared) or KEEP (defaults, prepared kept).
* Same archetype, different class: slots reset to the new defaults.
* Same class, different level: new maxima, remaining slots kept up to the
  new maximum.
* Edit session ended with non-default maxima and nothing above pending:
  PENDING_SLOT_DIRTY_CONFIRMATION, resolved by DISCARD (defaults) or KEEP.

Only one confirmation is pending at a time; a caster change always wins
over dirty slots.
"""

from __future__ import annotations

from dataclasses import dataclass

from dnd_sheet.core.exceptions import InvalidStateTransitionError
from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import Identity
from dnd_sheet.models.enums import CasterArchetype, ConfirmationChoice, TransitionKind, TransitionState
from dnd_sheet.models.spells import SpellSlots
from dnd_sheet.spellcasting.slot_table import classify, default_slots
from dnd_sheet.spellcasting.slots import compare_to_defaults, merge_slots, rescale_slots


logger = get_logger(__name__)

ALLOWED_CHOICES: dict[TransitionState, frozenset[ConfirmationChoice]] = {
    TransitionState.PENDING_CASTER_TYPE_CONFIRMATION: frozenset(
        {ConfirmationChoice.RESET, ConfirmationChoice.KEEP}
    ),
    TransitionState.PENDING_SLOT_DIRTY_CONFIRMATION: frozenset(
        {ConfirmationChoice.DISCARD, ConfirmationChoice.KEEP}
    ),
}


@dataclass(frozen=True)
class TransitionDecision:
    """What an identity or edit-mode change does to spell state.

    Attributes:
        kind: The kind of change.
        state: Detector state after the change.
        slots: Slots to store now, for immediate kinds; None otherwise.
        changes: Per-level differences, for dirty-slot confirmations.
        previous_archetype: Caster archetype before the change.
        current_archetype: Caster archetype after the change.
    """

    kind: TransitionKind
    state: TransitionState = TransitionState.STABLE
    slots: SpellSlots | None = None
    changes: tuple[str, ...] = ()
    previous_archetype: CasterArchetype = CasterArchetype.NONE
    current_archetype: CasterArchetype = CasterArchetype.NONE

    @property
    def is_pending(self) -> bool:
        return self.state is not TransitionState.STABLE


@dataclass(frozen=True)
class Resolution:
    """Outcome of answering a pending confirmation.

    Attributes:
        slots: Slots to store, or None to leave them as they are.
        clear_prepared: Whether prepared spells must be cleared.
        state: Detector state afterwards; always STABLE.
    """

    slots: SpellSlots | None
    clear_prepared: bool = False
    state: TransitionState = TransitionState.STABLE


def _defaults_for(identity: Identity) -> SpellSlots:
    return default_slots(identity.class_name, identity.subclass_name, identity.level)


def _same_text(left: str, right: str) -> bool:
    return (left or "").strip().lower() == (right or "").strip().lower()


def detect_transition(
    previous: Identity,
    current: Identity,
    slots: SpellSlots,
    *,
    was_editing: bool = False,
    is_editing: bool = False,
) -> TransitionDecision:
    """Decide how an identity or edit-mode change affects spell slots.

    Args:
        previous: Identity before the change.
        current: Identity after the change.
        slots: Stored slots before the change.
        was_editing: Edit mode before the change.
        is_editing: Edit mode after the change.

    Returns:
        The decision. Immediate kinds carry the slots to store.
    """
    previous_archetype = classify(previous.class_name, previous.subclass_name)
    current_archetype = classify(current.class_name, current.subclass_name)
    archetypes = {"previous_archetype": previous_archetype, "current_archetype": current_archetype}

    class_changed = not _same_text(previous.class_name, current.class_name)
    subclass_changed = not _same_text(previous.subclass_name, current.subclass_name)

    if (class_changed or subclass_changed) and previous_archetype is not current_archetype:
        logger.info(
            "Caster type change needs confirmation",
            previous_class=previous.class_name,
            current_class=current.class_name,
            previous_archetype=previous_archetype,
            current_archetype=current_archetype,
        )
        return TransitionDecision(
            kind=TransitionKind.CONFIRM_CASTER_CHANGE,
            state=TransitionState.PENDING_CASTER_TYPE_CONFIRMATION,
            **archetypes,
        )

    if class_changed and current_archetype.is_caster:
        logger.info("Class changed within caster type", current_class=current.class_name)
        return TransitionDecision(kind=TransitionKind.RECOMPUTE_DEFAULTS, slots=_defaults_for(current), **archetypes)

    if not class_changed and previous.level != current.level and current_archetype.is_caster:
        old_slots = merge_slots(slots, _defaults_for(previous))
        new_slots = rescale_slots(old_slots, _defaults_for(current))
        logger.info("Level changed, spell slots rescaled", previous_level=previous.level, current_level=current.level)
        return TransitionDecision(kind=TransitionKind.RESCALE_LEVEL, slots=new_slots, **archetypes)

    if was_editing and not is_editing:
        defaults = _defaults_for(current)
        dirtiness = compare_to_defaults(merge_slots(slots, defaults), defaults)
        if dirtiness.is_dirty:
            logger.info("Edited spell slots differ from defaults", changes=list(dirtiness.changes))
            return TransitionDecision(
                kind=TransitionKind.CONFIRM_DIRTY_SLOTS,
                state=TransitionState.PENDING_SLOT_DIRTY_CONFIRMATION,
                changes=dirtiness.changes,
                **archetypes,
            )

    return TransitionDecision(kind=TransitionKind.NONE, **archetypes)


def resolve_confirmation(
    state: TransitionState,
    choice: ConfirmationChoice | str,
    identity: Identity,
) -> Resolution:
    """Answer a pending confirmation.

    Args:
        state: The pending detector state.
        choice: The user's answer.
        identity: Current identity, for the default slots.

    Returns:
        What to apply.

    Raises:
        InvalidStateTransitionError: If nothing is pending or the choice
            does not answer the pending question.
    """
    allowed = ALLOWED_CHOICES.get(state)
    if allowed is None:
        raise InvalidStateTransitionError(
            "No confirmation is pending",
            current_state=state.value,
            expected_states=[pending.value for pending in ALLOWED_CHOICES],
        )

    if str(choice) not in {option.value for option in allowed}:
        raise InvalidStateTransitionError(
            f"Choice {str(choice)!r} does not answer the pending confirmation",
            current_state=state.value,
            details={"allowed_choices": sorted(option.value for option in allowed)},
        )
    choice = ConfirmationChoice(choice)

    logger.info("Confirmation resolved", state=state.value, choice=choice.value)
    if state is TransitionState.PENDING_CASTER_TYPE_CONFIRMATION:
        return Resolution(slots=_defaults_for(identity), clear_prepared=choice is ConfirmationChoice.RESET)
    if choice is ConfirmationChoice.DISCARD:
        return Resolution(slots=_defaults_for(identity))
    return Resolution(slots=None)


__all__ = [
    "TransitionDecision",
    "Resolution",
    "detect_transition",
    "resolve_confirmation",
]
