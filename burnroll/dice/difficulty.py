"""Difficulty classification for advancement.

A test is Routine, Difficult or Challenging depending on how the dice
rolled compare with the obstacle. The routine margin ("spread") widens as
the pool grows, which reproduces the ruleset's routine table:

    Dice   1  2  3  4  5  6  7  8  9
    Ob     1  1  2  2  3  4  4  5  6

A single die against Ob 1 is both routine and difficult; the player
picks which bucket the test counts toward.
"""

from burnroll.dice.types import DifficultyGroup


# (max_dice, spread): dice up to max_dice need this routine margin
ROUTINE_SPREADS: tuple[tuple[int, int], ...] = (
    (3, 1),
    (6, 2),
)
LARGE_POOL_SPREAD = 3


def routine_spread(dice: int) -> int:
    """Margin by which dice must exceed the obstacle for a routine test.

    Examples:
        >>> routine_spread(3)
        1
        >>> routine_spread(5)
        2
        >>> routine_spread(9)
        3
    """
    for max_dice, spread in ROUTINE_SPREADS:
        if dice <= max_dice:
            return spread
    return LARGE_POOL_SPREAD


def difficulty_group(
    dice: int,
    obstacle: int,
    ambiguous_max_dice: int = 1,
) -> DifficultyGroup:
    """Classify a test for advancement.

    Args:
        dice: Effective dice (exponent plus dice modifiers minus dice
            penalties, artha excluded).
        obstacle: Obstacle the test is measured against.
        ambiguous_max_dice: Largest pool that reports the ambiguous
            Routine/Difficult tier when it covers the obstacle.

    Returns:
        The difficulty tier. Defined for every integer input.

    Examples:
        >>> difficulty_group(4, 5).value
        'Challenging'
        >>> difficulty_group(1, 1).value
        'Routine/Difficult'
        >>> difficulty_group(5, 3).value
        'Routine'
        >>> difficulty_group(5, 4).value
        'Difficult'
    """
    if obstacle > dice:
        return DifficultyGroup.CHALLENGING

    if 1 <= dice <= ambiguous_max_dice:
        return DifficultyGroup.ROUTINE_OR_DIFFICULT

    if dice - routine_spread(dice) >= obstacle:
        return DifficultyGroup.ROUTINE

    return DifficultyGroup.DIFFICULT


# Name used by callers that think of this as the classifier
classify = difficulty_group
