"""Dice engine.

Submodules:
    dice: Notation parser, roll evaluator and advantage resolver.
    sources: Face-value sources (d20 library, scripted sequences).
    pool: Immutable dice pool builder.
    quick_rolls: Ability, save, initiative and weapon roll requests.
    roller: DiceRoller facade with roll history.
"""

from __future__ import annotations

from dnd_sheet.engine.dice import (
    AdvantageContext,
    AdvantageResult,
    DiceGroup,
    DiceSpec,
    RawResults,
    RollResult,
    evaluate,
    parse_notation,
    resolve_with_mode,
)
from dnd_sheet.engine.pool import DicePool
from dnd_sheet.engine.quick_rolls import (
    QuickRoll,
    ability_check,
    initiative,
    saving_throw,
    weapon_attack,
    weapon_damage,
)
from dnd_sheet.engine.roller import DiceRoller
from dnd_sheet.engine.sources import D20FaceSource, FaceValueSource, SequenceFaceSource


__all__ = [
    # Dice
    "RawResults",
    "DiceGroup",
    "DiceSpec",
    "parse_notation",
    "RollResult",
    "evaluate",
    "AdvantageResult",
    "AdvantageContext",
    "resolve_with_mode",
    # Sources
    "FaceValueSource",
    "D20FaceSource",
    "SequenceFaceSource",
    # Pools and quick rolls
    "DicePool",
    "QuickRoll",
    "ability_check",
    "saving_throw",
    "initiative",
    "weapon_attack",
    "weapon_damage",
    # Roller
    "DiceRoller",
]
