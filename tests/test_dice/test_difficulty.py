"""Tests for difficulty classification."""

import pytest

from burnroll.dice.difficulty import classify, difficulty_group, routine_spread
from burnroll.dice.types import DifficultyGroup


# Highest obstacle that is still routine for each pool size
ROUTINE_TABLE = {2: 1, 3: 2, 4: 2, 5: 3, 6: 4, 7: 4, 8: 5, 9: 6}


class TestRoutineSpread:
    """Tests for the routine margin."""

    def test_small_pools(self):
        """Test that pools up to 3 need a margin of 1."""
        assert [routine_spread(d) for d in (1, 2, 3)] == [1, 1, 1]

    def test_medium_pools(self):
        """Test that pools of 4-6 need a margin of 2."""
        assert [routine_spread(d) for d in (4, 5, 6)] == [2, 2, 2]

    def test_large_pools(self):
        """Test that pools of 7+ need a margin of 3."""
        assert [routine_spread(d) for d in (7, 10, 20)] == [3, 3, 3]


class TestDifficultyGroup:
    """Tests for the Routine/Difficult/Challenging tiers."""

    @pytest.mark.parametrize("dice,max_routine", sorted(ROUTINE_TABLE.items()))
    def test_routine_table(self, dice, max_routine):
        """Test the routine threshold for each pool size."""
        assert difficulty_group(dice, max_routine) is DifficultyGroup.ROUTINE
        assert difficulty_group(dice, max_routine + 1) is DifficultyGroup.DIFFICULT

    def test_obstacle_above_dice_is_challenging(self):
        """Test that an obstacle above the pool is challenging."""
        assert difficulty_group(4, 5) is DifficultyGroup.CHALLENGING

    def test_obstacle_equal_to_dice_is_difficult(self):
        """Test that an obstacle equal to the pool is difficult."""
        assert difficulty_group(5, 5) is DifficultyGroup.DIFFICULT

    def test_single_die_is_ambiguous(self):
        """Test that 1D against Ob 1 is both routine and difficult."""
        assert difficulty_group(1, 1) is DifficultyGroup.ROUTINE_OR_DIFFICULT

    def test_single_die_against_ob_two_is_challenging(self):
        """Test that the ambiguous tier needs the die to cover the obstacle."""
        assert difficulty_group(1, 2) is DifficultyGroup.CHALLENGING

    def test_ambiguous_range_is_configurable(self):
        """Test that a wider ambiguous range classifies 2D Ob 1 as ambiguous."""
        assert difficulty_group(2, 1) is DifficultyGroup.ROUTINE
        assert difficulty_group(2, 1, ambiguous_max_dice=2) is DifficultyGroup.ROUTINE_OR_DIFFICULT

    def test_no_dice_against_no_obstacle(self):
        """Test that an empty pool against Ob 0 is difficult."""
        assert difficulty_group(0, 0) is DifficultyGroup.DIFFICULT

    def test_no_dice_against_an_obstacle(self):
        """Test that an empty pool against any obstacle is challenging."""
        assert difficulty_group(0, 1) is DifficultyGroup.CHALLENGING

    def test_negative_dice(self):
        """Test that negative pools are classified without error."""
        assert difficulty_group(-2, 0) is DifficultyGroup.CHALLENGING
        assert difficulty_group(-2, -3) is DifficultyGroup.ROUTINE

    def test_eight_dice(self):
        """Test an 8D pool across obstacles."""
        assert difficulty_group(8, 5) is DifficultyGroup.ROUTINE
        assert difficulty_group(8, 6) is DifficultyGroup.DIFFICULT
        assert difficulty_group(8, 8) is DifficultyGroup.DIFFICULT
        assert difficulty_group(8, 9) is DifficultyGroup.CHALLENGING

    def test_classify_alias(self):
        """Test that classify is the same function."""
        assert classify is difficulty_group
