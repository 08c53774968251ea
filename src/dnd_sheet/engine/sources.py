"""Face-value sources for the dice pipeline.

A source turns a DiceSpec into raw faces, one per physical die, grouped by
die size and kept in roll order. The roller never assumes how faces are
produced: the d20 library, a scripted sequence, or a 3D physics front end
that reports its results back all fit the same protocol.

Percentile specs are special: the d100 face is the tens die (00-90) and the
d10 face is the ones die (0-9).
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from dnd_sheet.core.constants import PERCENTILE_ONES_SIDES, PERCENTILE_TENS_SIDES
from dnd_sheet.core.exceptions import DiceRollError
from dnd_sheet.core.logging import get_logger
from dnd_sheet.engine.dice import DiceSpec


logger = get_logger(__name__)


@runtime_checkable
class FaceValueSource(Protocol):
    """Anything that can roll the dice of a DiceSpec."""

    def roll(self, spec: DiceSpec) -> dict[int, list[int]]:
        """Roll every die in ``spec``.

        Returns:
            Faces keyed by die size, in roll order.
        """
        ...


class D20FaceSource:
    """Rolls faces with the d20 library.

    Example:
        >>> source = D20FaceSource(seed=42)
        >>> faces = source.roll(parse_notation("2d6"))
        >>> len(faces[6])
        2
    """

    def __init__(self, *, seed: int | None = None, max_dice: int = 100) -> None:
        """Initialize the source.

        Args:
            seed: Optional random seed for reproducible rolls.
            max_dice: Largest number of dice accepted in one request.
        """
        self._max_dice = max_dice
        if seed is not None:
            random.seed(seed)
        logger.debug("D20FaceSource initialized", seed=seed, max_dice=max_dice)

    def roll(self, spec: DiceSpec) -> dict[int, list[int]]:
        """Roll every die in ``spec``.

        Raises:
            DiceRollError: If the request exceeds the dice limit or the d20
                library rejects it.
        """
        if spec.total_dice > self._max_dice:
            raise DiceRollError(
                f"Too many dice in one roll ({spec.total_dice} > {self._max_dice})",
                expression=spec.notation,
            )

        faces: dict[int, list[int]] = {}
        for group in spec.groups:
            if spec.is_percentile:
                # Both percentile dice are ten-sided; shift to 0-based faces.
                rolled = [face - 1 for face in self._roll_faces(group.count, PERCENTILE_ONES_SIDES)]
                if group.sides == PERCENTILE_TENS_SIDES:
                    rolled = [face * 10 for face in rolled]
            else:
                rolled = self._roll_faces(group.count, group.sides)
            faces.setdefault(group.sides, []).extend(rolled)
        return faces

    def _roll_faces(self, count: int, sides: int) -> list[int]:
        import d20

        expression = f"{count}d{sides}"
        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc
        return self._extract_dice_values(result.expr)

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Collect the kept die faces from a d20 expression tree."""
        import d20

        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(int(die.number))
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values


class SequenceFaceSource:
    """Replays scripted faces, for tests and for results reported back by a
    physical or simulated dice front end.

    Faces for each die size are handed out in order across calls. When a
    size runs dry the request is answered with what is left.

    Example:
        >>> source = SequenceFaceSource({20: [15, 8]})
        >>> source.roll(parse_notation("2d20"))
        {20: [15, 8]}
    """

    def __init__(self, faces: Mapping[int, Iterable[int]] | None = None) -> None:
        self._queues: dict[int, list[int]] = {
            sides: list(values) for sides, values in (faces or {}).items()
        }

    def push(self, sides: int, *values: int) -> None:
        """Queue more faces for a die size."""
        self._queues.setdefault(sides, []).extend(values)

    def remaining(self, sides: int) -> int:
        return len(self._queues.get(sides, ()))

    def roll(self, spec: DiceSpec) -> dict[int, list[int]]:
        faces: dict[int, list[int]] = {}
        for group in spec.groups:
            queue = self._queues.get(group.sides, [])
            taken, self._queues[group.sides] = queue[: group.count], queue[group.count :]
            if len(taken) < group.count:
                logger.warning(
                    "Scripted faces exhausted",
                    sides=group.sides,
                    requested=group.count,
                    supplied=len(taken),
                )
            faces.setdefault(group.sides, []).extend(taken)
        return faces


__all__ = [
    "FaceValueSource",
    "D20FaceSource",
    "SequenceFaceSource",
]
