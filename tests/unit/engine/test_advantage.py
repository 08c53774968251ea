"""Tests for advantage and disadvantage resolution."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dnd_sheet.core.exceptions import DiceRollError
from dnd_sheet.engine.dice import AdvantageContext, DiceGroup, DiceSpec, parse_notation, resolve_with_mode
from dnd_sheet.models.enums import RollMode


D20 = DiceSpec((DiceGroup(1, 20),))
PERCENTILE = DiceSpec((DiceGroup(1, 100), DiceGroup(1, 10)))

faces = st.integers(min_value=1, max_value=20)
bonuses = st.integers(min_value=-5, max_value=15)


class TestResolveWithMode:
    """Tests for resolve_with_mode."""

    def test_advantage_label(self) -> None:
        """Test the combined trace for an advantage check."""
        result = resolve_with_mode(D20, 2, RollMode.ADVANTAGE, "STR", {20: [15, 8]})

        assert result.total_a == 17
        assert result.total_b == 10
        assert result.winning_total == 17
        assert result.chosen == "a"
        assert result.label == "STR: [15] + 2 vs [8] + 2 => 17 (adv)"

    def test_disadvantage_picks_lower(self) -> None:
        """Test that disadvantage keeps the lower total."""
        result = resolve_with_mode(D20, 0, RollMode.DISADVANTAGE, "", {20: [15, 8]})

        assert result.total == 8
        assert result.chosen == "b"
        assert result.label == "[15] vs [8] => 8 (dis)"

    def test_ties_go_to_first_candidate(self) -> None:
        """Test that equal totals choose candidate A."""
        for mode in (RollMode.ADVANTAGE, RollMode.DISADVANTAGE):
            assert resolve_with_mode(D20, 0, mode, "", {20: [9, 9]}).chosen == "a"

    def test_multi_die_groups_split_by_count(self) -> None:
        """Test that each group's first count faces go to A."""
        spec = parse_notation("2d6+1d4")
        assert spec is not None

        result = resolve_with_mode(spec, 1, RollMode.ADVANTAGE, "", {6: [1, 2, 6, 5], 4: [4, 1]})

        assert result.detail_a == "[1,2] + [4] + 1"
        assert result.detail_b == "[6,5] + [1] + 1"
        assert result.winning_total == 13

    def test_notation_modifier_added_to_bonus(self) -> None:
        """Test that the notation's own modifier applies to both candidates."""
        spec = parse_notation("1d20+3")
        assert spec is not None

        result = resolve_with_mode(spec, 2, RollMode.ADVANTAGE, "", {20: [10, 4]})

        assert (result.total_a, result.total_b) == (15, 9)

    def test_percentile_pairs(self) -> None:
        """Test percentile candidates pair tens and ones positionally."""
        result = resolve_with_mode(PERCENTILE, 0, RollMode.DISADVANTAGE, "", {100: [30, 0], 10: [5, 0]})

        assert result.total_a == 35
        assert result.total_b == 100
        assert result.winning_total == 35
        assert result.detail_b == "d100 (0 + 0) = 100"

    def test_short_faces_split_in_half(self) -> None:
        """Test the fallback when fewer faces than expected arrive."""
        spec = parse_notation("2d6")
        assert spec is not None

        result = resolve_with_mode(spec, 0, RollMode.ADVANTAGE, "", {6: [6, 1, 3]})

        assert result.detail_a == "[6]"
        assert result.detail_b == "[1,3]"
        assert result.winning_total == 6

    def test_single_face_reused(self) -> None:
        """Test that a lone face serves both candidates."""
        result = resolve_with_mode(D20, 1, RollMode.ADVANTAGE, "", {20: [12]})

        assert result.total_a == result.total_b == 13

    def test_normal_mode_rejected(self) -> None:
        """Test that NORMAL is not an advantage mode."""
        with pytest.raises(DiceRollError):
            resolve_with_mode(D20, 0, RollMode.NORMAL, "", {20: [1, 2]})

    @given(a=faces, b=faces, bonus=bonuses)
    def test_advantage_is_max(self, a: int, b: int, bonus: int) -> None:
        """Property: advantage keeps max(A, B)."""
        result = resolve_with_mode(D20, bonus, RollMode.ADVANTAGE, "", {20: [a, b]})

        assert result.winning_total == max(a, b) + bonus

    @given(a=faces, b=faces, bonus=bonuses)
    def test_disadvantage_is_min(self, a: int, b: int, bonus: int) -> None:
        """Property: disadvantage keeps min(A, B)."""
        result = resolve_with_mode(D20, bonus, RollMode.DISADVANTAGE, "", {20: [a, b]})

        assert result.winning_total == min(a, b) + bonus

    @given(
        count=st.integers(min_value=1, max_value=4),
        rolled=st.lists(st.integers(min_value=1, max_value=8), min_size=8, max_size=8),
    )
    def test_candidates_partition_faces(self, count: int, rolled: list[int]) -> None:
        """Property: the two candidates together use exactly the doubled faces."""
        spec = DiceSpec((DiceGroup(count, 8),))
        doubled = rolled[: count * 2]

        result = resolve_with_mode(spec, 0, RollMode.ADVANTAGE, "", {8: doubled})

        assert result.total_a + result.total_b == sum(doubled)
        assert result.total_a == sum(doubled[:count])


class TestAdvantageContext:
    """Tests for the AdvantageContext lifecycle."""

    def test_request_spec_doubles_counts(self) -> None:
        """Test that faces are requested for doubled counts."""
        context = AdvantageContext(mode=RollMode.ADVANTAGE, flat_bonus=0, dice_spec=D20)

        assert context.request_spec.notation == "2d20"

    def test_resolves_once(self) -> None:
        """Test that a context can only be consumed once."""
        context = AdvantageContext(mode=RollMode.ADVANTAGE, flat_bonus=1, dice_spec=D20, label="DEX")

        result = context.resolve({20: [3, 18]})

        assert result.winning_total == 19
        assert context.is_resolved
        with pytest.raises(DiceRollError):
            context.resolve({20: [3, 18]})

    def test_normal_mode_rejected(self) -> None:
        """Test that a context cannot be created for a normal roll."""
        with pytest.raises(DiceRollError):
            AdvantageContext(mode=RollMode.NORMAL, flat_bonus=0, dice_spec=D20)
