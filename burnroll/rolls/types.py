"""Roll request and result types.

A RollRequest is what a caller (dialog, CLI, bot) collects from the
player. BaseRollData is the normalized per-attempt snapshot built from
it, and RollReport is the artifact handed back for display.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from burnroll.advancement.tax import TaxAssessment
from burnroll.dice.types import DieResult, DifficultyGroup


RawNumber = str | int | None


class RollValidationError(ValueError):
    """A roll attempt was rejected before any dice were drawn."""

    pass


class RollCategory(str, Enum):
    """Kind of test. Each category has exactly one handler."""

    STAT = "stat"
    ATTRIBUTE = "attribute"
    SKILL = "skill"
    CIRCLES = "circles"
    LEARNING = "learning"
    TAX = "tax"


@dataclass(frozen=True)
class RollRequest:
    """Player input for one roll attempt.

    Numeric fields are taken as typed by the player; anything that does
    not parse as an integer counts as 0.

    Attributes:
        category: Which kind of test to run.
        character_key: Character making the test.
        trait_key: Trait being tested. Ignored for circles (always the
            character's circles attribute) and tax (the configured tax stat).
        difficulty: Nominal obstacle.
        bonus_dice: Advantage dice from help, gear, etc.
        artha_dice: Dice bought with persona/deeds.
        selected_modifiers: Names of optional roll modifiers to apply.
        forks: Checked FoRK options (skill tests), name -> dice.
        circles_bonuses: Checked circles bonuses, name -> dice.
        circles_maluses: Checked circles maluses, name -> obstacle.
        relationship_key: Named contact for a circles test.
        spell_name: Spell being sustained (tax tests).
    """

    category: RollCategory
    character_key: str
    trait_key: str = ""
    difficulty: RawNumber = None
    bonus_dice: RawNumber = None
    artha_dice: RawNumber = None
    selected_modifiers: tuple[str, ...] = ()
    forks: Mapping[str, RawNumber] = field(default_factory=dict)
    circles_bonuses: Mapping[str, RawNumber] = field(default_factory=dict)
    circles_maluses: Mapping[str, RawNumber] = field(default_factory=dict)
    relationship_key: str | None = None
    spell_name: str | None = None


@dataclass(frozen=True)
class BaseRollData:
    """Normalized inputs for a single roll attempt.

    Attributes:
        wound_dice: Dice lost to wounds.
        ob_penalty: Obstacle added by wounds.
        difficulty: Nominal obstacle.
        bonus_dice: Advantage dice.
        artha_dice: Artha dice.
        misc_dice: Sum of applied dice modifiers.
        misc_dice_sources: Label -> signed amount for each dice modifier.
        misc_obstacle: Sum of applied obstacle modifiers.
        misc_obstacle_sources: Label -> signed amount for each obstacle modifier.
        penalty_sources: Label -> signed amount for wound obstacle penalties.
    """

    wound_dice: int = 0
    ob_penalty: int = 0
    difficulty: int = 0
    bonus_dice: int = 0
    artha_dice: int = 0
    misc_dice: int = 0
    misc_dice_sources: Mapping[str, str] = field(default_factory=dict)
    misc_obstacle: int = 0
    misc_obstacle_sources: Mapping[str, str] = field(default_factory=dict)
    penalty_sources: Mapping[str, str] = field(default_factory=dict)

    @property
    def obstacle_total(self) -> int:
        """Obstacle the roll must meet. Negative means any roll succeeds."""
        return self.difficulty + self.ob_penalty + self.misc_obstacle

    @property
    def base_obstacle(self) -> int:
        """Nominal obstacle plus wound penalty, without modifiers."""
        return self.difficulty + self.ob_penalty


@dataclass
class RollReport:
    """Result artifact for display.

    Attributes:
        name: Title of the test (e.g., "Sword Test").
        category: Kind of test.
        successes: Number of successes rolled.
        difficulty: Obstacle shown on the result (category dependent).
        obstacle_total: Obstacle after penalties and modifiers.
        success: Whether the test passed.
        difficulty_group: Tier used for advancement.
        dice: Every die rolled.
        die_sources: Label -> signed dice contribution.
        penalty_sources: Label -> signed obstacle contribution.
        extra_info: Free text for display (tax results, contacts).
        tax: Tax consequence for failed tax tests.
        advancement_notes: What the advancement step recorded or committed.
    """

    name: str
    category: RollCategory
    successes: int
    difficulty: int
    obstacle_total: int
    success: bool
    difficulty_group: DifficultyGroup
    dice: tuple[DieResult, ...] = ()
    die_sources: dict[str, str] = field(default_factory=dict)
    penalty_sources: dict[str, str] = field(default_factory=dict)
    extra_info: str = ""
    tax: TaxAssessment | None = None
    advancement_notes: list[str] = field(default_factory=list)

    @property
    def pool_size(self) -> int:
        """Dice rolled before explosions."""
        return sum(1 for die in self.dice if not die.exploded)
