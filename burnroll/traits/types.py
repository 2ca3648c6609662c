"""Character trait type definitions.

Traits are owned by the character store. The roll engine only ever sees
these frozen snapshots and sends changes back through the store.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from burnroll.dice.types import Shade


class TraitKind(str, Enum):
    """Category of a rollable trait."""

    STAT = "stat"  # Will, Perception, Agility, Speed, Power, Forte
    SKILL = "skill"
    ATTRIBUTE = "attribute"  # Circles, Resources and other derived abilities


class ModifierTarget(str, Enum):
    """What a roll modifier adjusts. A modifier adjusts exactly one."""

    DICE = "dice"
    OBSTACLE = "obstacle"


@dataclass(frozen=True)
class AdvancementRecord:
    """Tests logged toward a trait's next advancement.

    Attributes:
        routine: Routine tests since the last advancement.
        difficult: Difficult tests since the last advancement.
        challenging: Challenging tests since the last advancement.
        learning_progress: Beginner's luck tests toward learning the skill.
        tax: Dice currently lost to tax (Will tax, Forte tax).
    """

    routine: int = 0
    difficult: int = 0
    challenging: int = 0
    learning_progress: int = 0
    tax: int = 0

    @property
    def total_tests(self) -> int:
        return self.routine + self.difficult + self.challenging

    def reset(self) -> "AdvancementRecord":
        """Fresh record after an advancement. Tax is not part of the reset."""
        return AdvancementRecord(tax=self.tax)


@dataclass(frozen=True)
class Trait:
    """Snapshot of a trait being tested.

    Attributes:
        key: Store key (e.g., 'will', 'sword').
        name: Display name (e.g., 'Will', 'Sword').
        kind: Stat, skill or attribute.
        exponent: Base number of dice. Never negative.
        open: Whether rolls with this trait are open-ended.
        shade: Shade of the trait.
        aptitude: Tests needed to learn the skill by beginner's luck.
        root_traits: Keys of the governing stats (zero, one or two).
        learning: True while the skill is only usable via beginner's luck.
        record: Advancement bookkeeping.
    """

    key: str
    name: str
    kind: TraitKind = TraitKind.STAT
    exponent: int = 0
    open: bool = False
    shade: Shade = Shade.BLACK
    aptitude: int | None = None
    root_traits: tuple[str, ...] = ()
    learning: bool = False
    record: AdvancementRecord = field(default_factory=AdvancementRecord)

    def __post_init__(self) -> None:
        if self.exponent < 0:
            raise ValueError(f"Exponent must be non-negative, got {self.exponent}")
        if len(self.root_traits) > 2:
            raise ValueError(f"A trait has at most two roots, got {self.root_traits}")

    @property
    def has_dual_roots(self) -> bool:
        return len(self.root_traits) == 2

    def with_record(self, record: AdvancementRecord) -> "Trait":
        return replace(self, record=record)


@dataclass(frozen=True)
class RollModifier:
    """A named adjustment that can apply to a roll.

    Attributes:
        name: Label shown in the roll breakdown.
        amount: Signed number of dice or obstacle points.
        target: Whether it adjusts the dice pool or the obstacle.
        optional: True if the player chooses to apply it, False if automatic.
    """

    name: str
    amount: int
    target: ModifierTarget = ModifierTarget.DICE
    optional: bool = False

    @property
    def applies_to_dice(self) -> bool:
        return self.target is ModifierTarget.DICE

    @property
    def applies_to_obstacle(self) -> bool:
        return self.target is ModifierTarget.OBSTACLE


@dataclass(frozen=True)
class Relationship:
    """A character's relationship, usable as a named contact on Circles."""

    key: str
    name: str
    building: bool = False
    building_progress: int = 0


@dataclass(frozen=True)
class CharacterCondition:
    """Physical condition read model (wound penalties)."""

    wound_dice: int = 0
    ob_penalty: int = 0
