"""Dice system for Burning Wheel style tests.

Provides d6 pool rolling and difficulty classification.

Usage:
    >>> from burnroll.dice import roll_dice, difficulty_group, Shade
    >>> outcome = roll_dice(5, open=True, shade=Shade.GREY)
    >>> tier = difficulty_group(5, 3)
"""

# Types
from burnroll.dice.types import (
    DieResult,
    DifficultyGroup,
    RollOutcome,
    Shade,
)

# Roller
from burnroll.dice.roller import roll_dice

# Classifier
from burnroll.dice.difficulty import classify, difficulty_group, routine_spread

__all__ = [
    # Types
    "DieResult",
    "DifficultyGroup",
    "RollOutcome",
    "Shade",
    # Roller
    "roll_dice",
    # Classifier
    "classify",
    "difficulty_group",
    "routine_spread",
]
