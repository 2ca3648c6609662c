"""Advancement rules.

Pure functions over AdvancementRecord. Advancing a trait needs a mix of
tests logged since its last advancement:

    Exponent  Routine  Difficult  Challenging
    1         1        1          1
    2         2        1          1
    3         3        2          1
    4         4        3          2
    5+        -        exp - 1    exp // 2

Below exponent 5 the challenging tests are always needed, plus either the
difficult or the routine quota. From exponent 5 on, routine tests no
longer count and both the difficult and challenging quotas are needed.
Stats never count routine tests.
"""

from dataclasses import dataclass, replace

from burnroll.dice.types import DifficultyGroup
from burnroll.traits.types import AdvancementRecord


# Exponent at which routine tests stop counting toward advancement
ROUTINE_CUTOFF = 5

# Beginner's luck exponents are measured against this base
LEARNING_BASE = 10


@dataclass(frozen=True)
class TestsRequired:
    """Quota of tests for the next advancement."""

    __test__ = False  # not a pytest class

    routine: int
    difficult: int
    challenging: int


def tests_required(exponent: int) -> TestsRequired:
    """Get the quota of tests needed to advance from an exponent.

    Examples:
        >>> tests_required(3)
        TestsRequired(routine=3, difficult=2, challenging=1)
        >>> tests_required(6)
        TestsRequired(routine=0, difficult=5, challenging=3)
    """
    return TestsRequired(
        routine=exponent if exponent < ROUTINE_CUTOFF else 0,
        difficult=max(1, exponent - 1),
        challenging=max(1, exponent // 2),
    )


def can_advance(record: AdvancementRecord, exponent: int, routines_count: bool = True) -> bool:
    """Check whether a trait has logged enough tests to advance.

    Args:
        record: Tests logged since the last advancement.
        exponent: Current exponent of the trait.
        routines_count: False for stats, which ignore routine tests.

    Returns:
        True if the trait is eligible to advance.
    """
    if exponent <= 0:
        return record.total_tests >= 1

    required = tests_required(exponent)
    enough_routine = routines_count and record.routine >= required.routine
    enough_difficult = record.difficult >= required.difficult
    enough_challenging = record.challenging >= required.challenging

    if exponent < ROUTINE_CUTOFF:
        return enough_challenging and (enough_difficult or enough_routine)
    return enough_difficult and enough_challenging


def is_applicable(group: DifficultyGroup, exponent: int) -> bool:
    """Whether a test of this tier counts for a trait of this exponent."""
    if group is DifficultyGroup.ROUTINE:
        return exponent < ROUTINE_CUTOFF
    return not group.is_ambiguous


def add_test(record: AdvancementRecord, exponent: int, group: DifficultyGroup) -> AdvancementRecord:
    """Log one test in the matching tier bucket.

    Args:
        record: Current record.
        exponent: Current exponent of the trait.
        group: Resolved tier. The ambiguous tier must be resolved first.

    Returns:
        A new record with one increment, or the same record if the test
        does not count at this exponent.

    Raises:
        ValueError: If the ambiguous Routine/Difficult tier is passed.
    """
    if group.is_ambiguous:
        raise ValueError("Resolve Routine/Difficult to a single tier before logging it")
    if not is_applicable(group, exponent):
        return record

    if group is DifficultyGroup.ROUTINE:
        return replace(record, routine=record.routine + 1)
    if group is DifficultyGroup.DIFFICULT:
        return replace(record, difficult=record.difficult + 1)
    return replace(record, challenging=record.challenging + 1)


def learning_tests_required(aptitude: int | None, default: int = LEARNING_BASE) -> int:
    """Beginner's luck tests needed before a skill is learned."""
    return aptitude or default


def beginners_luck_exponent(aptitude: int | None, default_aptitude: int = 1) -> int:
    """Exponent rolled for a beginner's luck test.

    Examples:
        >>> beginners_luck_exponent(4)
        6
        >>> beginners_luck_exponent(None)
        9
    """
    return LEARNING_BASE - (aptitude or default_aptitude)


def learning_start_exponent(required_tests: int) -> int:
    """Starting exponent of a skill learned through beginner's luck.

    Examples:
        >>> learning_start_exponent(4)
        3
        >>> learning_start_exponent(7)
        1
    """
    return max(0, (LEARNING_BASE - required_tests) // 2)
