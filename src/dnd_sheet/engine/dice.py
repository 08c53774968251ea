"""Dice notation parsing and roll evaluation for D&D 5E.

This module is the pure half of the dice pipeline. It never generates
random numbers: it turns notation into a DiceSpec, and turns a DiceSpec
plus already-rolled face values into totals and readable traces. Face
values come from a FaceValueSource (see ``dnd_sheet.engine.sources``).

Raw face values are passed as a mapping of die size to the faces rolled
for that size, in roll order. When several groups share a die size they
consume that size's faces in the order the groups appear.

Example:
    >>> spec = parse_notation("2d6+1d4+3")
    >>> result = evaluate(spec, {6: [4, 2], 4: [3]}, label="Damage")
    >>> result.total
    12
    >>> result.label
    'Damage: [4,2] + [3] + 3'
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from dnd_sheet.core.constants import (
    PERCENTILE_ONES_SIDES,
    PERCENTILE_TENS_SIDES,
    PERCENTILE_ZERO_RESULT,
)
from dnd_sheet.core.exceptions import DiceRollError
from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.enums import RollMode


logger = get_logger(__name__)

RawResults = Mapping[int, Sequence[int]]
"""Face values keyed by die size, in roll order."""

DICE_GROUP_PATTERN = re.compile(r"(\d*)d(\d+)", re.IGNORECASE)
MODIFIER_PATTERN = re.compile(r"([+-])\s*(\d+)")


@dataclass(frozen=True)
class DiceGroup:
    """A number of dice of one size, e.g. the '2d6' in '2d6+3'."""

    count: int
    sides: int

    @property
    def notation(self) -> str:
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class DiceSpec:
    """A parsed dice expression.

    Attributes:
        groups: Dice groups in order of appearance.
        modifier: Sum of the flat +N/-N terms.
    """

    groups: tuple[DiceGroup, ...]
    modifier: int = 0

    @property
    def notation(self) -> str:
        """Canonical notation, e.g. '2d6+1d4+3'."""
        text = "+".join(group.notation for group in self.groups)
        if self.modifier > 0:
            text += f"+{self.modifier}"
        elif self.modifier < 0:
            text += f"{self.modifier}"
        return text

    @property
    def total_dice(self) -> int:
        return sum(group.count for group in self.groups)

    @property
    def is_percentile(self) -> bool:
        """True for exactly one d100 group plus one d10 group."""
        sides = [group.sides for group in self.groups]
        return (
            len(sides) == 2
            and sides.count(PERCENTILE_TENS_SIDES) == 1
            and sides.count(PERCENTILE_ONES_SIDES) == 1
        )

    def doubled(self) -> DiceSpec:
        """Same expression with every group's count doubled."""
        return DiceSpec(
            groups=tuple(DiceGroup(group.count * 2, group.sides) for group in self.groups),
            modifier=self.modifier,
        )

    def with_modifier(self, extra: int) -> DiceSpec:
        return DiceSpec(groups=self.groups, modifier=self.modifier + extra)


def parse_notation(notation: str) -> DiceSpec | None:
    """Parse dice notation such as '2d6+1d4+3' or 'd20 - 1'.

    Every ``{count}d{sides}`` substring becomes a group (count defaults to
    1). What remains after removing the groups is scanned for signed
    integers, which are summed into the modifier. Die sizes are not checked
    against the standard set, so homebrew dice like d7 are accepted.

    Args:
        notation: The notation to parse.

    Returns:
        The parsed DiceSpec, or None when the text holds no dice group.
    """
    groups: list[DiceGroup] = []
    for count_text, sides_text in DICE_GROUP_PATTERN.findall(notation or ""):
        count = int(count_text) if count_text else 1
        sides = int(sides_text)
        if count < 1 or sides < 1:
            logger.debug("Skipping empty dice group", notation=notation, count=count, sides=sides)
            continue
        groups.append(DiceGroup(count=count, sides=sides))

    if not groups:
        return None

    remainder = DICE_GROUP_PATTERN.sub("", notation)
    modifier = 0
    for sign, digits in MODIFIER_PATTERN.findall(remainder):
        modifier += int(digits) if sign == "+" else -int(digits)

    return DiceSpec(groups=tuple(groups), modifier=modifier)


# =============================================================================
# Evaluation
# =============================================================================


@dataclass(frozen=True)
class RollResult:
    """The outcome of evaluating a DiceSpec against rolled faces.

    Attributes:
        spec: The evaluated expression.
        total: Sum of all faces plus the modifier.
        group_values: Faces assigned to each group, in group order.
        detail: Trace such as '[4,2] + [3] + 3'.
        label: Trace prefixed with the roll label, when one was given.
    """

    spec: DiceSpec
    total: int
    group_values: tuple[tuple[int, ...], ...]
    detail: str
    label: str

    @property
    def mode(self) -> RollMode:
        return RollMode.NORMAL


def _format_modifier(value: int) -> str:
    return f"+ {value}" if value >= 0 else f"- {abs(value)}"


def _format_breakdown(group_values: Sequence[Sequence[int]], modifier: int) -> str:
    parts = " + ".join(
        "[" + ",".join(str(value) for value in values) + "]"
        for values in group_values
        if values
    )
    if modifier:
        parts = f"{parts} {_format_modifier(modifier)}" if parts else _format_modifier(modifier)
    return parts or "0"


def _with_label(label: str, detail: str) -> str:
    return f"{label}: {detail}" if label else detail


def _percentile_base(tens: int, ones: int) -> int:
    base = tens + ones
    return PERCENTILE_ZERO_RESULT if base == 0 else base


def _assign_group_values(
    groups: Sequence[DiceGroup],
    raw: RawResults,
    *,
    per_group_multiplier: int = 1,
) -> list[list[int]]:
    """Hand each group its faces, consuming each die size in order."""
    offsets: dict[int, int] = {}
    assigned: list[list[int]] = []
    for group in groups:
        available = list(raw.get(group.sides, ()))
        start = offsets.get(group.sides, 0)
        wanted = group.count * per_group_multiplier
        values = [int(value) for value in available[start : start + wanted]]
        offsets[group.sides] = start + len(values)
        assigned.append(values)
    return assigned


def _first_face(raw: RawResults, sides: int) -> int:
    values = raw.get(sides) or ()
    return int(values[0]) if values else 0


def evaluate(spec: DiceSpec, raw: RawResults, label: str = "") -> RollResult:
    """Compute the total and trace for a roll.

    A percentile spec (one d100 and one d10 group) adds the tens and ones
    faces, reading 00 + 0 as 100. Otherwise each group's faces are summed
    and the modifier added. A group that received no faces is left out of
    the trace but does not zero the rest of the roll.

    Args:
        spec: The parsed expression.
        raw: Rolled faces keyed by die size.
        label: Optional roll label prefixed to the trace.

    Returns:
        The evaluated RollResult.
    """
    if spec.is_percentile:
        tens = _first_face(raw, PERCENTILE_TENS_SIDES)
        ones = _first_face(raw, PERCENTILE_ONES_SIDES)
        base = _percentile_base(tens, ones)
        detail = f"d100 ({tens} + {ones}) = {base}"
        total = base + spec.modifier
        if spec.modifier:
            detail = f"{detail} {_format_modifier(spec.modifier)} = {total}"
        group_values = tuple(
            (tens,) if group.sides == PERCENTILE_TENS_SIDES else (ones,) for group in spec.groups
        )
        return RollResult(
            spec=spec,
            total=total,
            group_values=group_values,
            detail=detail,
            label=_with_label(label, detail),
        )

    assigned = _assign_group_values(spec.groups, raw)
    total = sum(sum(values) for values in assigned) + spec.modifier
    detail = _format_breakdown(assigned, spec.modifier)
    return RollResult(
        spec=spec,
        total=total,
        group_values=tuple(tuple(values) for values in assigned),
        detail=detail,
        label=_with_label(label, detail),
    )


# =============================================================================
# Advantage / Disadvantage
# =============================================================================


@dataclass(frozen=True)
class AdvantageResult:
    """The outcome of an advantage or disadvantage roll.

    Attributes:
        mode: ADVANTAGE or DISADVANTAGE.
        total_a: Bonused total of the first candidate.
        total_b: Bonused total of the second candidate.
        winning_total: max (advantage) or min (disadvantage) of the two.
        chosen: 'a' or 'b'; ties go to 'a'.
        detail_a: Trace of the first candidate.
        detail_b: Trace of the second candidate.
        label: Combined trace, e.g. 'STR: [15] + 2 vs [8] + 2 => 17 (adv)'.
    """

    mode: RollMode
    total_a: int
    total_b: int
    winning_total: int
    chosen: str
    detail_a: str
    detail_b: str
    label: str

    @property
    def total(self) -> int:
        return self.winning_total


def _split_candidates(values: list[int], count: int) -> tuple[list[int], list[int]]:
    """Split one group's doubled faces into the two candidate pools."""
    if len(values) >= count * 2:
        return values[:count], values[count : count * 2]
    # Short of faces: halve what arrived, or reuse a lone face for both.
    if len(values) == 1:
        return list(values), list(values)
    half = len(values) // 2
    return values[:half], values[half:]


def _pick(mode: RollMode, total_a: int, total_b: int) -> tuple[int, str]:
    if mode is RollMode.ADVANTAGE:
        return (total_a, "a") if total_a >= total_b else (total_b, "b")
    return (total_a, "a") if total_a <= total_b else (total_b, "b")


def resolve_with_mode(
    spec: DiceSpec,
    bonus: int,
    mode: RollMode,
    label: str,
    raw: RawResults,
) -> AdvantageResult:
    """Resolve a doubled roll into two candidates and pick the winner.

    ``raw`` must hold the faces rolled for ``spec.doubled()``. For each
    group the first ``count`` faces go to candidate A and the next
    ``count`` to candidate B. A percentile spec with exactly two d100 and
    two d10 faces pairs them positionally instead. Both candidates receive
    the spec's modifier plus ``bonus``.

    Args:
        spec: The undoubled expression.
        bonus: Extra flat bonus on top of the notation's modifier.
        mode: ADVANTAGE or DISADVANTAGE.
        label: Roll label for the combined trace.
        raw: Rolled faces keyed by die size.

    Returns:
        The resolved AdvantageResult.

    Raises:
        DiceRollError: If mode is NORMAL.
    """
    if mode is RollMode.NORMAL:
        raise DiceRollError("Advantage resolution needs advantage or disadvantage", expression=spec.notation)

    flat = spec.modifier + bonus
    tens = list(raw.get(PERCENTILE_TENS_SIDES, ()))
    ones = list(raw.get(PERCENTILE_ONES_SIDES, ()))

    if spec.is_percentile and len(tens) == 2 and len(ones) == 2:
        base_a = _percentile_base(int(tens[0]), int(ones[0]))
        base_b = _percentile_base(int(tens[1]), int(ones[1]))
        total_a = base_a + flat
        total_b = base_b + flat
        detail_a = f"d100 ({tens[0]} + {ones[0]}) = {base_a}"
        detail_b = f"d100 ({tens[1]} + {ones[1]}) = {base_b}"
        if flat:
            detail_a = f"{detail_a} {_format_modifier(flat)}"
            detail_b = f"{detail_b} {_format_modifier(flat)}"
    else:
        assigned = _assign_group_values(spec.groups, raw, per_group_multiplier=2)
        pools_a: list[list[int]] = []
        pools_b: list[list[int]] = []
        for group, values in zip(spec.groups, assigned):
            if len(values) < group.count * 2:
                logger.warning(
                    "Too few faces for advantage split",
                    group=group.notation,
                    expected=group.count * 2,
                    received=len(values),
                )
            pool_a, pool_b = _split_candidates(values, group.count)
            pools_a.append(pool_a)
            pools_b.append(pool_b)
        total_a = sum(sum(pool) for pool in pools_a) + flat
        total_b = sum(sum(pool) for pool in pools_b) + flat
        detail_a = _format_breakdown(pools_a, flat)
        detail_b = _format_breakdown(pools_b, flat)

    winning_total, chosen = _pick(mode, total_a, total_b)
    combined = f"{detail_a} vs {detail_b} => {winning_total} ({mode.short_label})"

    return AdvantageResult(
        mode=mode,
        total_a=total_a,
        total_b=total_b,
        winning_total=winning_total,
        chosen=chosen,
        detail_a=detail_a,
        detail_b=detail_b,
        label=_with_label(label, combined),
    )


@dataclass
class AdvantageContext:
    """A pending advantage/disadvantage roll.

    Created when the roll is requested, before faces exist. The faces must
    be rolled for ``request_spec`` (counts doubled) and handed to
    ``resolve`` exactly once.

    Attributes:
        mode: ADVANTAGE or DISADVANTAGE.
        flat_bonus: Extra flat bonus added to both candidates.
        dice_spec: The undoubled expression.
        label: Roll label.
    """

    mode: RollMode
    flat_bonus: int
    dice_spec: DiceSpec
    label: str = ""
    _resolved: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.mode is RollMode.NORMAL:
            raise DiceRollError(
                "Advantage context needs advantage or disadvantage",
                expression=self.dice_spec.notation,
            )

    @property
    def request_spec(self) -> DiceSpec:
        """The expression to request faces for."""
        return self.dice_spec.doubled()

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def resolve(self, raw: RawResults) -> AdvantageResult:
        """Consume the rolled faces.

        Raises:
            DiceRollError: If the context was already resolved.
        """
        if self._resolved:
            raise DiceRollError("Advantage roll already resolved", expression=self.dice_spec.notation)
        self._resolved = True
        return resolve_with_mode(self.dice_spec, self.flat_bonus, self.mode, self.label, raw)


__all__ = [
    "RawResults",
    "DiceGroup",
    "DiceSpec",
    "parse_notation",
    "RollResult",
    "evaluate",
    "AdvantageResult",
    "resolve_with_mode",
    "AdvantageContext",
]
