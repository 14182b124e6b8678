"""Tests for dice expressions."""

import random

import pytest

from engine.dice import DiceResult, roll, roll_keep_highest


class TestRoll:
    """Tests for roll()."""

    def test_single_die(self):
        result = roll("1d20", rng=random.Random(5))
        assert isinstance(result, DiceResult)
        assert len(result.rolls) == 1
        assert 1 <= result.total <= 20
        assert result.dropped == []

    def test_rolls_kept_in_throw_order(self):
        check_rng = random.Random(8)
        expected = [check_rng.randint(1, 4) for _ in range(5)]
        assert roll("5d4", rng=random.Random(8)).rolls == expected

    @pytest.mark.parametrize("notation,modifier", [("1d8+3", 3), ("1d8-2", -2), ("2d6", 0)])
    def test_modifier(self, notation, modifier):
        result = roll(notation, rng=random.Random(3))
        assert result.modifier == modifier
        assert result.total == sum(result.rolls) + modifier

    def test_starting_gold_range(self):
        """5d4 stays within 5-20 however it lands."""
        rng = random.Random(17)
        totals = {roll("5d4", rng=rng).total for _ in range(300)}
        assert min(totals) >= 5
        assert max(totals) <= 20

    def test_notation_normalised(self):
        assert roll(" 2D6+3 ").notation == "2d6+3"

    @pytest.mark.parametrize("notation", ["", "bad", "d6", "2d", "2d6+", "3d6k", "1d6*2"])
    def test_malformed(self, notation):
        with pytest.raises(ValueError):
            roll(notation)

    @pytest.mark.parametrize("notation", ["0d6", "1d0", "3d6k4", "3d6k0"])
    def test_unrollable(self, notation):
        with pytest.raises(ValueError):
            roll(notation)

    def test_keep_suffix_with_modifier(self):
        result = roll("4d6k3+1", rng=random.Random(2))
        assert len(result.rolls) == 3
        assert len(result.dropped) == 1
        assert result.total == sum(result.rolls) + 1


class TestRollKeepHighest:
    """Tests for roll_keep_highest()."""

    def test_drops_lowest(self):
        check_rng = random.Random(7)
        raw = [check_rng.randint(1, 6) for _ in range(4)]

        result = roll_keep_highest(4, 6, 3, rng=random.Random(7))
        assert result.rolls == sorted(raw, reverse=True)[:3]
        assert result.dropped == [min(raw)]
        assert result.total == sum(raw) - min(raw)
        assert result.notation == "4d6k3"

    def test_ability_score_range(self):
        rng = random.Random(99)
        for _ in range(200):
            assert 3 <= roll_keep_highest(4, 6, 3, rng=rng).total <= 18

    def test_keep_all(self):
        result = roll_keep_highest(3, 6, 3, rng=random.Random(1))
        assert result.dropped == []
        assert len(result.rolls) == 3

    def test_invalid_keep(self):
        with pytest.raises(ValueError):
            roll_keep_highest(3, 6, 4)
        with pytest.raises(ValueError):
            roll_keep_highest(3, 6, 0)
