"""D&D 5E character sheet rules engine.

Spellcasting and dice resolution for a character sheet application:
spell slot tables, slot bookkeeping, known and prepared spells,
spellcasting statistics, class/level change handling and a dice
pipeline with advantage, disadvantage and percentile rolls.

The engine owns no randomness and no storage. Dice faces come from an
injected FaceValueSource; character documents are loaded and saved by the
consuming application.

Example:
    >>> from dnd_sheet import DiceRoller, Identity, Spellbook, default_slots
    >>>
    >>> default_slots("Wizard", "", 5).max_for(3)
    2
    >>> roller = DiceRoller()
    >>> result = roller.roll("2d6+3", label="Damage")

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for slots, spellbook state and characters.
    engine: Dice notation, evaluation, advantage, pools and quick rolls.
    spellcasting: Slot tables, slot state, known spells, stats, transitions.
"""

from __future__ import annotations

# Core
from dnd_sheet.core.config import Settings, get_settings
from dnd_sheet.core.exceptions import DndSheetError
from dnd_sheet.core.logging import configure_logging, get_logger

# Models
from dnd_sheet.models import (
    Abilities,
    Ability,
    CasterArchetype,
    CharacterRecord,
    ConfirmationChoice,
    Identity,
    RollMode,
    SpellbookState,
    SpellSlotEntry,
    SpellSlots,
    ability_modifier,
)

# Dice
from dnd_sheet.engine import (
    D20FaceSource,
    DicePool,
    DiceRoller,
    SequenceFaceSource,
    evaluate,
    parse_notation,
    resolve_with_mode,
)

# Spellcasting
from dnd_sheet.spellcasting import (
    Spellbook,
    calculate_stats,
    classify,
    default_slots,
    detect_transition,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "DndSheetError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "Abilities",
    "CasterArchetype",
    "CharacterRecord",
    "ConfirmationChoice",
    "Identity",
    "RollMode",
    "SpellbookState",
    "SpellSlotEntry",
    "SpellSlots",
    "ability_modifier",
    # Dice
    "parse_notation",
    "evaluate",
    "resolve_with_mode",
    "D20FaceSource",
    "SequenceFaceSource",
    "DicePool",
    "DiceRoller",
    # Spellcasting
    "classify",
    "default_slots",
    "calculate_stats",
    "detect_transition",
    "Spellbook",
]
