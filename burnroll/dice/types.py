"""Dice system type definitions.

Immutable dataclasses for dice pools and their outcomes, plus the
enumerations shared by the roller and the difficulty classifier.
"""

from dataclasses import dataclass, field
from enum import Enum


DIE_FACES = 6

# Success threshold for a Black shade die; each shade step lowers it by one
BLACK_THRESHOLD = 4
MIN_THRESHOLD = 2


class Shade(str, Enum):
    """Shade of a trait. Lighter shades succeed on lower faces."""

    BLACK = "B"
    GREY = "G"
    WHITE = "W"

    @property
    def threshold(self) -> int:
        """Lowest die face that counts as a success.

        Examples:
            >>> Shade.BLACK.threshold
            4
            >>> Shade.WHITE.threshold
            2
        """
        steps = list(Shade).index(self)
        return max(MIN_THRESHOLD, BLACK_THRESHOLD - steps)


class DifficultyGroup(str, Enum):
    """Difficulty tier of a test, used to bucket it for advancement."""

    ROUTINE = "Routine"
    DIFFICULT = "Difficult"
    CHALLENGING = "Challenging"
    ROUTINE_OR_DIFFICULT = "Routine/Difficult"

    @property
    def is_ambiguous(self) -> bool:
        """Whether the player has to pick the bucket for this test."""
        return self is DifficultyGroup.ROUTINE_OR_DIFFICULT


@dataclass(frozen=True)
class DieResult:
    """A single resolved die.

    Attributes:
        face: Face shown (1-6).
        success: Whether the face met the shade threshold.
        exploded: True if this die was added because another die showed a 6
            on an open-ended roll.
    """

    face: int
    success: bool
    exploded: bool = False


@dataclass(frozen=True)
class RollOutcome:
    """Result of rolling a pool of d6.

    Attributes:
        pool_size: Dice requested after clamping (exploded dice excluded).
        open: Whether the roll was open-ended.
        shade: Shade used for the success threshold.
        dice: Every die rolled, including exploded ones, in roll order.
    """

    pool_size: int
    open: bool
    shade: Shade
    dice: tuple[DieResult, ...] = field(default_factory=tuple)

    @property
    def successes(self) -> int:
        """Total number of successful dice."""
        return sum(1 for die in self.dice if die.success)

    @property
    def faces(self) -> tuple[int, ...]:
        """Die faces in roll order."""
        return tuple(die.face for die in self.dice)

    @property
    def exploded_count(self) -> int:
        """Number of extra dice added by open-ended sixes."""
        return sum(1 for die in self.dice if die.exploded)
