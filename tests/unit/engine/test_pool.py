"""Tests for the dice pool builder."""

from __future__ import annotations

import pytest

from dnd_sheet.core.exceptions import DiceRollError
from dnd_sheet.engine.pool import DicePool


class TestDicePool:
    """Tests for DicePool."""

    def test_notation_in_insertion_order(self) -> None:
        """Test combined notation."""
        pool = DicePool().add("d6").add("d8").add("d6")

        assert pool.notation == "2d6+1d8"
        assert pool.total_dice == 3

    def test_immutable(self) -> None:
        """Test that changes return a new pool."""
        empty = DicePool()
        pool = empty.add("d20")

        assert empty.is_empty
        assert pool.is_single_die

    def test_decrement_removes_last(self) -> None:
        """Test that decrementing the last die drops the entry."""
        pool = DicePool().add("d4", 2)

        pool = pool.decrement("d4")
        assert pool.count("d4") == 1

        pool = pool.decrement("d4")
        assert pool.is_empty

    def test_remove_and_clear(self) -> None:
        """Test removing a die size and clearing."""
        pool = DicePool().add("d6", 3).add("d10")

        assert pool.remove("d6").notation == "1d10"
        assert pool.clear().is_empty

    def test_case_insensitive_names(self) -> None:
        """Test that 'D12' and 'd12' are the same die."""
        assert DicePool().add("D12").add("d12").notation == "2d12"

    @pytest.mark.parametrize("name", ["x6", "6", "d0", ""])
    def test_invalid_die_name(self, name: str) -> None:
        """Test that non-die names are rejected."""
        with pytest.raises(DiceRollError):
            DicePool().add(name)
