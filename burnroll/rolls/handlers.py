"""Roll handlers, one per test category.

Every handler runs the same pipeline:

    solicit  -> load the trait and condition, validate, derive inputs
    resolve  -> extract base data, roll the pool, classify, judge success
    record   -> hand the outcome to the advancement engine

Validation happens entirely in solicit, so a rejected attempt never draws
dice or touches the store. Player decisions raised while recording go
through the engine's PromptSurface.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

from burnroll.advancement.engine import AdvancementEngine
from burnroll.advancement.rules import beginners_luck_exponent
from burnroll.advancement.tax import assess_tax
from burnroll.config import Settings, get_settings
from burnroll.dice.difficulty import difficulty_group
from burnroll.dice.roller import roll_dice
from burnroll.rolls.base_data import (
    build_dice_sources,
    extract_base_data,
    parse_int,
    signed,
    sum_checked_options,
)
from burnroll.rolls.types import (
    BaseRollData,
    RollCategory,
    RollReport,
    RollRequest,
    RollValidationError,
)
from burnroll.traits.ports import CharacterStore
from burnroll.traits.types import CharacterCondition, Relationship, Trait, TraitKind


logger = logging.getLogger(__name__)

CIRCLES_TRAIT = "circles"
NAMED_CONTACT = "Named Contact"
BEGINNERS_LUCK = "Beginner's Luck"


@dataclass
class RollAttempt:
    """Everything solicited for one roll, ready to resolve.

    Attributes:
        request: Raw player input.
        trait: Trait snapshot borrowed from the store for this roll.
        base: Normalized base data.
        name: Title of the test.
        exponent: Exponent actually rolled (synthesized for beginner's luck).
        tax: Dice lost to the trait's tax.
        extra_dice: Category-specific dice (FoRKs, circles bonuses, contact).
        extra_dice_sources: Labels for extra_dice.
        extra_obstacle: Category-specific obstacle (circles maluses,
            beginner's luck surcharge).
        extra_obstacle_sources: Labels for extra_obstacle.
        classify_extra_obstacle: Whether extra_obstacle is part of the
            obstacle used for difficulty classification.
        judge_on_base_obstacle: Whether success is judged against the
            nominal obstacle plus wounds only (stat and attribute tests).
        relationship: Named contact for circles tests.
    """

    request: RollRequest
    trait: Trait
    base: BaseRollData
    name: str
    exponent: int
    tax: int = 0
    extra_dice: int = 0
    extra_dice_sources: dict[str, str] = field(default_factory=dict)
    extra_obstacle: int = 0
    extra_obstacle_sources: dict[str, str] = field(default_factory=dict)
    classify_extra_obstacle: bool = True
    judge_on_base_obstacle: bool = False
    relationship: Relationship | None = None

    @property
    def character_key(self) -> str:
        return self.request.character_key

    @property
    def effective_dice(self) -> int:
        """Dice used for classification. Artha does not make a test easier."""
        base = self.base
        return (
            self.exponent
            + base.bonus_dice
            + base.misc_dice
            + self.extra_dice
            - base.wound_dice
            - self.tax
        )

    @property
    def pool_size(self) -> int:
        """Dice rolled. Never negative."""
        return max(0, self.effective_dice + self.base.artha_dice)

    @property
    def obstacle_total(self) -> int:
        return self.base.obstacle_total + self.extra_obstacle

    @property
    def classification_obstacle(self) -> int:
        if self.classify_extra_obstacle:
            return self.obstacle_total
        return self.base.obstacle_total

    @property
    def success_obstacle(self) -> int:
        if self.judge_on_base_obstacle:
            return self.base.base_obstacle
        return self.obstacle_total


class RollHandler(ABC):
    """Base handler. Subclasses customize solicit and record."""

    category: RollCategory

    def __init__(
        self,
        store: CharacterStore,
        engine: AdvancementEngine,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.engine = engine
        self.settings = settings or get_settings()

    def run(
        self,
        request: RollRequest,
        on_resolved: Callable[[RollReport], None] | None = None,
    ) -> RollReport:
        """Solicit, resolve and record one roll.

        Args:
            request: Player input for the attempt.
            on_resolved: Called with the report once the dice are rolled and
                before any advancement prompt is raised.

        Raises:
            RollValidationError: If the attempt is rejected before rolling.
        """
        attempt = self.solicit(request)
        report = self.resolve(attempt)
        if on_resolved is not None:
            on_resolved(report)
        self.record(attempt, report)
        return report

    # ------------------------------------------------------------------
    # Solicit
    # ------------------------------------------------------------------

    def solicit(self, request: RollRequest) -> RollAttempt:
        trait = self._load_trait(request, request.trait_key)
        self._require_obstacle(request)
        base = self._base_data(request, trait)
        return RollAttempt(
            request=request,
            trait=trait,
            base=base,
            name=f"{trait.name} Test",
            exponent=trait.exponent,
        )

    def _condition(self, request: RollRequest) -> CharacterCondition:
        condition = self.store.get_condition(request.character_key)
        if condition is None:
            raise RollValidationError(f"Unknown character '{request.character_key}'")
        return condition

    def _load_trait(self, request: RollRequest, trait_key: str) -> Trait:
        if not request.character_key:
            raise RollValidationError("Tried to roll without a character")
        if not trait_key:
            raise RollValidationError(f"Tried to roll a {self.category.value} test with no trait set")
        self._condition(request)
        trait = self.store.get_trait(request.character_key, trait_key)
        if trait is None:
            raise RollValidationError(
                f"Character '{request.character_key}' has no trait '{trait_key}'"
            )
        return trait

    def _require_obstacle(self, request: RollRequest) -> None:
        difficulty = request.difficulty
        if difficulty is None or (isinstance(difficulty, str) and not difficulty.strip()):
            raise RollValidationError(
                f"Tried to roll a {self.category.value} test with no obstacle set"
            )

    def _base_data(self, request: RollRequest, trait: Trait) -> BaseRollData:
        modifiers = self.store.get_roll_modifiers(request.character_key, trait.key)
        return extract_base_data(request, self._condition(request), modifiers)

    def _require_kind(self, trait: Trait, *kinds: TraitKind) -> None:
        if trait.kind not in kinds:
            raise RollValidationError(
                f"{trait.name} is a {trait.kind.value}, not a "
                f"{' or '.join(k.value for k in kinds)}"
            )

    # ------------------------------------------------------------------
    # Resolve
    # ------------------------------------------------------------------

    def resolve(self, attempt: RollAttempt) -> RollReport:
        base = attempt.base
        outcome = roll_dice(attempt.pool_size, attempt.trait.open, attempt.trait.shade)
        group = difficulty_group(
            attempt.effective_dice,
            attempt.classification_obstacle,
            ambiguous_max_dice=self.settings.ambiguous_max_dice,
        )
        success = outcome.successes >= attempt.success_obstacle
        logger.debug(
            f"{attempt.name}: {attempt.pool_size}D vs Ob {attempt.obstacle_total} "
            f"({group.value}) -> {outcome.successes} successes"
        )

        die_sources = build_dice_sources(
            attempt.exponent,
            artha_dice=base.artha_dice,
            bonus_dice=base.bonus_dice,
            wound_dice=base.wound_dice,
            tax=attempt.tax,
        )
        die_sources.update(attempt.extra_dice_sources)
        die_sources.update(base.misc_dice_sources)

        penalty_sources = dict(base.penalty_sources)
        penalty_sources.update(attempt.extra_obstacle_sources)
        penalty_sources.update(base.misc_obstacle_sources)

        return RollReport(
            name=attempt.name,
            category=self.category,
            successes=outcome.successes,
            difficulty=self._displayed_difficulty(attempt),
            obstacle_total=attempt.obstacle_total,
            success=success,
            difficulty_group=group,
            dice=outcome.dice,
            die_sources=die_sources,
            penalty_sources=penalty_sources,
        )

    def _displayed_difficulty(self, attempt: RollAttempt) -> int:
        return attempt.base.difficulty

    # ------------------------------------------------------------------
    # Record
    # ------------------------------------------------------------------

    @abstractmethod
    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        """Hand the resolved roll to the advancement engine."""


class StatRollHandler(RollHandler):
    """Stat tests. The stat's accumulated tax (e.g., Will tax) costs dice."""

    category = RollCategory.STAT

    def solicit(self, request: RollRequest) -> RollAttempt:
        attempt = super().solicit(request)
        self._require_kind(attempt.trait, TraitKind.STAT)
        attempt.tax = attempt.trait.record.tax
        attempt.judge_on_base_obstacle = True
        return attempt

    def _displayed_difficulty(self, attempt: RollAttempt) -> int:
        return attempt.base.base_obstacle

    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        result = self.engine.record_stat_test(
            attempt.character_key, attempt.trait, report.difficulty_group, report.success
        )
        report.advancement_notes.extend(result.notes)


class AttributeRollHandler(RollHandler):
    """Attribute tests (Resources and other derived abilities)."""

    category = RollCategory.ATTRIBUTE

    def solicit(self, request: RollRequest) -> RollAttempt:
        attempt = super().solicit(request)
        self._require_kind(attempt.trait, TraitKind.ATTRIBUTE)
        attempt.judge_on_base_obstacle = True
        return attempt

    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        result = self.engine.record_stat_test(
            attempt.character_key, attempt.trait, report.difficulty_group, report.success
        )
        report.advancement_notes.extend(result.notes)


class SkillRollHandler(RollHandler):
    """Skill tests. Checked FoRKs each add their own labeled dice."""

    category = RollCategory.SKILL

    def solicit(self, request: RollRequest) -> RollAttempt:
        attempt = super().solicit(request)
        skill = attempt.trait
        self._require_kind(skill, TraitKind.SKILL)
        if skill.learning:
            raise RollValidationError(
                f"{skill.name} has not been learned yet; roll it as beginner's luck"
            )

        forks, labels = sum_checked_options(request.forks)
        attempt.extra_dice = forks
        attempt.extra_dice_sources = {f"FoRK: {name}": amount for name, amount in labels.items()}
        return attempt

    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        result = self.engine.record_skill_test(
            attempt.character_key, attempt.trait, report.difficulty_group, report.success
        )
        report.advancement_notes.extend(result.notes)


class CirclesRollHandler(RollHandler):
    """Circles tests with situational bonuses, maluses and a named contact."""

    category = RollCategory.CIRCLES

    def solicit(self, request: RollRequest) -> RollAttempt:
        trait = self._load_trait(request, request.trait_key or CIRCLES_TRAIT)
        self._require_obstacle(request)
        attempt = RollAttempt(
            request=request,
            trait=trait,
            base=self._base_data(request, trait),
            name="Circles Test",
            exponent=trait.exponent,
        )

        bonus, bonus_labels = sum_checked_options(request.circles_bonuses)
        malus, malus_labels = sum_checked_options(request.circles_maluses)
        attempt.extra_dice = bonus
        attempt.extra_dice_sources = bonus_labels
        attempt.extra_obstacle = malus
        attempt.extra_obstacle_sources = malus_labels

        if request.relationship_key:
            contact = self.store.get_relationship(request.character_key, request.relationship_key)
            if contact is None:
                raise RollValidationError(
                    f"Character '{request.character_key}' has no relationship "
                    f"'{request.relationship_key}'"
                )
            attempt.relationship = contact
            attempt.extra_dice += 1
            attempt.extra_dice_sources[NAMED_CONTACT] = "+1"

        return attempt

    def resolve(self, attempt: RollAttempt) -> RollReport:
        report = super().resolve(attempt)
        if attempt.relationship is not None:
            report.extra_info = f"Calling on {attempt.relationship.name}."
        return report

    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        result = self.engine.record_stat_test(
            attempt.character_key, attempt.trait, report.difficulty_group, report.success
        )
        report.advancement_notes.extend(result.notes)

        # Written after the stat test; a rejected stat write skips it
        contact = attempt.relationship
        if contact is not None and contact.building:
            updated = self.store.update_relationship_progress(
                attempt.character_key, contact.key, contact.building_progress + 1
            )
            report.advancement_notes.append(
                f"{updated.name} building progress {updated.building_progress}."
            )


class LearningRollHandler(RollHandler):
    """Beginner's luck tests for skills not yet learned.

    The exponent comes from the skill's aptitude and the obstacle is
    doubled. Classification uses the nominal obstacle.
    """

    category = RollCategory.LEARNING

    def solicit(self, request: RollRequest) -> RollAttempt:
        attempt = super().solicit(request)
        skill = attempt.trait
        self._require_kind(skill, TraitKind.SKILL)
        if not skill.learning:
            raise RollValidationError(f"{skill.name} is already learned; roll it as a skill")

        difficulty = attempt.base.difficulty
        attempt.name = f"{BEGINNERS_LUCK} {skill.name} Test"
        attempt.exponent = beginners_luck_exponent(skill.aptitude, self.settings.default_aptitude)
        attempt.extra_obstacle = difficulty
        attempt.extra_obstacle_sources = {BEGINNERS_LUCK: signed(difficulty)}
        attempt.classify_extra_obstacle = False
        return attempt

    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        result = self.engine.record_learning_test(
            attempt.character_key, attempt.trait, report.difficulty_group, report.success
        )
        report.advancement_notes.extend(result.notes)


class TaxRollHandler(RollHandler):
    """Tests to sustain a spell, paid for with the tax stat."""

    category = RollCategory.TAX

    def solicit(self, request: RollRequest) -> RollAttempt:
        obstacle = parse_int(request.difficulty)
        if not obstacle and not request.spell_name:
            raise RollValidationError("Tried to roll a tax test with no obstacle or spell name set.")

        trait = self._load_trait(request, request.trait_key or self.settings.tax_stat)
        self._require_kind(trait, TraitKind.STAT)
        spell = request.spell_name or "Unknown Spell"
        return RollAttempt(
            request=request,
            trait=trait,
            base=self._base_data(request, trait),
            name=f"{spell} Tax Test",
            exponent=trait.exponent,
            tax=trait.record.tax,
        )

    def _displayed_difficulty(self, attempt: RollAttempt) -> int:
        return attempt.base.base_obstacle

    def resolve(self, attempt: RollAttempt) -> RollReport:
        report = super().resolve(attempt)
        trait = attempt.trait
        spell = attempt.request.spell_name or "Unknown Spell"
        report.extra_info = f"Attempting to sustain {spell}."

        assessment = assess_tax(
            exponent=trait.exponent,
            current_tax=attempt.tax,
            obstacle_total=attempt.obstacle_total,
            successes=report.successes,
        )
        if assessment is None:
            return report

        report.tax = assessment
        if assessment.overtaxed:
            report.extra_info += (
                f" Tax test failed by {assessment.margin}. The caster maxes out their "
                f"{trait.name} tax and risks a B{assessment.wound_severity} wound."
            )
        else:
            report.extra_info += (
                f" Tax test failed by {assessment.margin}. The caster's {trait.name} is taxed."
            )
        return report

    def record(self, attempt: RollAttempt, report: RollReport) -> None:
        result = self.engine.record_tax_test(
            attempt.character_key,
            attempt.trait,
            report.difficulty_group,
            report.success,
            report.tax,
        )
        report.advancement_notes.extend(result.notes)


HANDLERS: dict[RollCategory, type[RollHandler]] = {
    RollCategory.STAT: StatRollHandler,
    RollCategory.ATTRIBUTE: AttributeRollHandler,
    RollCategory.SKILL: SkillRollHandler,
    RollCategory.CIRCLES: CirclesRollHandler,
    RollCategory.LEARNING: LearningRollHandler,
    RollCategory.TAX: TaxRollHandler,
}
