"""Dice roller facade.

Ties the pure dice pipeline to a face-value source: parses notation,
requests faces (doubled for advantage and disadvantage), evaluates the
result and keeps a short history of roll traces.

Example:
    >>> roller = DiceRoller(SequenceFaceSource({20: [15, 8]}))
    >>> result = roller.roll("1d20", bonus=2, mode=RollMode.ADVANTAGE, label="STR")
    >>> result.label
    'STR: [15] + 2 vs [8] + 2 => 17 (adv)'
"""

from __future__ import annotations

import re
from collections import deque
from typing import TYPE_CHECKING

from dnd_sheet.core.config import Settings, get_settings
from dnd_sheet.core.exceptions import DiceRollError
from dnd_sheet.core.logging import get_logger
from dnd_sheet.engine.dice import (
    AdvantageContext,
    AdvantageResult,
    DiceSpec,
    RollResult,
    evaluate,
    parse_notation,
)
from dnd_sheet.engine.sources import D20FaceSource, FaceValueSource
from dnd_sheet.models.enums import RollMode


if TYPE_CHECKING:
    from dnd_sheet.engine.pool import DicePool
    from dnd_sheet.engine.quick_rolls import QuickRoll


logger = get_logger(__name__)

LITERAL_PATTERN = re.compile(r"^\s*([+-]?\d+)\s*$")


class DiceRoller:
    """Rolls dice notation through an injected face-value source.

    Attributes:
        source: Where raw faces come from.
        max_dice: Largest number of dice in one request, after doubling.
    """

    def __init__(
        self,
        source: FaceValueSource | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the roller.

        Args:
            source: Face-value source. Defaults to a d20-library source
                configured from settings.
            settings: Settings to use instead of the global ones.
        """
        settings = settings or get_settings()
        self.max_dice = settings.dice.max_dice_per_roll
        self.source: FaceValueSource = source or D20FaceSource(
            seed=settings.dice.seed,
            max_dice=self.max_dice,
        )
        self._history: deque[str] = deque(maxlen=settings.dice.history_limit)
        logger.info("DiceRoller initialized", source=type(self.source).__name__)

    @property
    def history(self) -> tuple[str, ...]:
        """Recent roll traces, newest first."""
        return tuple(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    def roll(
        self,
        notation: str,
        *,
        bonus: int = 0,
        mode: RollMode = RollMode.NORMAL,
        label: str = "",
    ) -> RollResult | AdvantageResult:
        """Roll a dice expression.

        Args:
            notation: Dice notation, e.g. '2d6+3', or a literal integer.
            bonus: Flat bonus on top of the notation's modifier.
            mode: Normal, advantage or disadvantage.
            label: Label for the roll trace.

        Returns:
            A RollResult for normal and literal rolls, an AdvantageResult
            otherwise.

        Raises:
            DiceRollError: If the notation holds no dice and is not an
                integer, or the request exceeds the dice limit.
        """
        logger.debug("Rolling dice", notation=notation, bonus=bonus, mode=mode)

        spec = parse_notation(notation)
        if spec is None:
            result: RollResult | AdvantageResult = self._roll_literal(notation, bonus, label)
        elif mode is RollMode.NORMAL:
            spec = spec.with_modifier(bonus)
            result = evaluate(spec, self._request(spec), label)
        else:
            context = AdvantageContext(mode=mode, flat_bonus=bonus, dice_spec=spec, label=label)
            result = context.resolve(self._request(context.request_spec))

        self._history.appendleft(result.label)
        logger.info("Dice rolled", notation=notation, mode=mode, total=result.total)
        return result

    def roll_pool(
        self,
        pool: DicePool,
        *,
        mode: RollMode = RollMode.NORMAL,
        label: str = "",
    ) -> RollResult | AdvantageResult:
        """Roll everything in a dice pool.

        Advantage and disadvantage apply only to a pool of a single die;
        larger pools roll normally.

        Raises:
            DiceRollError: If the pool is empty.
        """
        if pool.is_empty:
            raise DiceRollError("Dice pool is empty")
        if mode is not RollMode.NORMAL and not pool.is_single_die:
            logger.debug("Ignoring roll mode for multi-die pool", notation=pool.notation, mode=mode)
            mode = RollMode.NORMAL
        return self.roll(pool.notation, mode=mode, label=label)

    def roll_quick(self, request: QuickRoll, *, mode: RollMode = RollMode.NORMAL) -> RollResult | AdvantageResult:
        return self.roll(request.notation, bonus=request.bonus, mode=mode, label=request.label)

    def _request(self, spec: DiceSpec) -> dict[int, list[int]]:
        if spec.total_dice > self.max_dice:
            raise DiceRollError(
                f"Too many dice in one roll ({spec.total_dice} > {self.max_dice})",
                expression=spec.notation,
            )
        return self.source.roll(spec)

    def _roll_literal(self, notation: str, bonus: int, label: str) -> RollResult:
        match = LITERAL_PATTERN.match(notation or "")
        if not match:
            raise DiceRollError(f"Not a dice expression: {notation!r}", expression=notation)
        total = int(match.group(1)) + bonus
        spec = DiceSpec(groups=(), modifier=total)
        detail = str(total)
        return RollResult(
            spec=spec,
            total=total,
            group_values=(),
            detail=detail,
            label=f"{label}: {detail}" if label else detail,
        )


__all__ = [
    "DiceRoller",
]
