"""Advancement engine.

Logs tests against traits and walks the player through the decisions
advancement can raise: which bucket an ambiguous test counts toward,
which root stat gets credit for a beginner's luck test, whether to
advance an eligible trait, and whether to accept tax from a failed
sustain test.

Every decision is a synchronous PromptSurface call that happens before
the matching store write. A test that makes a trait eligible is held
back until the player answers: advancing writes the new exponent and a
fresh record together, while declining writes nothing at all. A failed
sustain test asks about tax before its stat test is written.
"""

import logging
from dataclasses import dataclass, field

from burnroll.advancement.rules import (
    add_test,
    can_advance,
    learning_start_exponent,
    learning_tests_required,
)
from burnroll.advancement.tax import TaxAssessment
from burnroll.config import Settings, get_settings
from burnroll.dice.types import DifficultyGroup
from burnroll.traits.ports import CharacterStore, PromptSurface
from burnroll.traits.types import Trait


logger = logging.getLogger(__name__)

APPLY_AS_ROUTINE = "Apply as Routine"
APPLY_AS_DIFFICULT = "Apply as Difficult"


@dataclass
class AdvancementReport:
    """What one advancement step did.

    Attributes:
        trait_key: Trait the test was logged against (may be a root stat).
        recorded: Tier bucket that received the test, None if nothing logged.
        learning_progress: New beginner's luck progress, if that path ran.
        eligible: Whether the trait reached its quota.
        advanced: Whether an advancement (or graduation) was committed.
        new_exponent: Exponent after a committed advancement.
        graduated: Whether a beginner's luck skill became a full skill.
        tax_committed: Whether a tax change was written.
        notes: Human readable summary lines.
    """

    trait_key: str
    recorded: DifficultyGroup | None = None
    learning_progress: int | None = None
    eligible: bool = False
    advanced: bool = False
    new_exponent: int | None = None
    graduated: bool = False
    tax_committed: bool = False
    notes: list[str] = field(default_factory=list)


class AdvancementEngine:
    """Single writer for advancement counters, learning progress and tax."""

    def __init__(
        self,
        store: CharacterStore,
        prompts: PromptSurface,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Character store that owns the traits.
            prompts: Surface used for player confirmations and choices.
            settings: Ruleset settings (defaults to the cached settings).
        """
        self.store = store
        self.prompts = prompts
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Stats and skills
    # ------------------------------------------------------------------

    def record_stat_test(
        self,
        character_key: str,
        trait: Trait,
        group: DifficultyGroup,
        success: bool,
    ) -> AdvancementReport:
        """Log a stat or attribute test. Routine tests never advance a stat."""
        return self._record(character_key, trait, group, success, routines_count=False)

    def record_skill_test(
        self,
        character_key: str,
        skill: Trait,
        group: DifficultyGroup,
        success: bool,
    ) -> AdvancementReport:
        """Log a skill test."""
        return self._record(character_key, skill, group, success, routines_count=True)

    def _record(
        self,
        character_key: str,
        trait: Trait,
        group: DifficultyGroup,
        success: bool,
        routines_count: bool,
    ) -> AdvancementReport:
        report = AdvancementReport(trait_key=trait.key)

        if group.is_ambiguous:
            choice = self.prompts.choose(
                f"Pick where to assign the {trait.name} test",
                [DifficultyGroup.ROUTINE.value, DifficultyGroup.DIFFICULT.value],
            )
            if choice is None:
                report.notes.append(f"{trait.name} test was not recorded.")
                return report
            group = DifficultyGroup(choice)

        new_record = add_test(trait.record, trait.exponent, group)
        if new_record == trait.record:
            report.notes.append(
                f"{group.value} tests no longer count toward advancing {trait.name}."
            )
            return report

        if can_advance(new_record, trait.exponent, routines_count=routines_count):
            report.eligible = True
            self._offer_advancement(character_key, trait, group, report)
            return report

        trait = self.store.update_trait(
            character_key,
            trait.key,
            routine=new_record.routine,
            difficult=new_record.difficult,
            challenging=new_record.challenging,
        )
        report.recorded = group
        report.notes.append(
            f"{trait.name}: {group.value} {'success' if success else 'failure'} recorded."
        )
        logger.debug(f"Logged {group.value} test for {character_key}/{trait.key}: {trait.record}")
        return report

    def _offer_advancement(
        self,
        character_key: str,
        trait: Trait,
        group: DifficultyGroup,
        report: AdvancementReport,
    ) -> None:
        confirmed = self.prompts.confirm(
            f"Advance {trait.name}?",
            f"{trait.name} is ready to advance. Go ahead?",
        )
        if not confirmed:
            report.notes.append(
                f"{trait.name} advancement declined; the test was not recorded."
            )
            return

        fresh = trait.record.reset()
        advanced = self.store.update_trait(
            character_key,
            trait.key,
            exponent=trait.exponent + 1,
            routine=fresh.routine,
            difficult=fresh.difficult,
            challenging=fresh.challenging,
        )
        report.recorded = group
        report.advanced = True
        report.new_exponent = advanced.exponent
        report.notes.append(f"{trait.name} advanced to {advanced.exponent}.")
        logger.info(f"{character_key}: {trait.name} advanced to {advanced.exponent}")

    # ------------------------------------------------------------------
    # Beginner's luck
    # ------------------------------------------------------------------

    def record_learning_test(
        self,
        character_key: str,
        skill: Trait,
        group: DifficultyGroup,
        success: bool,
    ) -> AdvancementReport:
        """Log a beginner's luck test.

        Routine tests count toward learning the skill. Difficult and
        Challenging tests go to the skill's root stat instead.
        """
        if group is DifficultyGroup.ROUTINE:
            return self._advance_learning(character_key, skill)

        if group.is_ambiguous:
            choice = self.prompts.choose(
                "Pick where to assign the test",
                [APPLY_AS_ROUTINE, APPLY_AS_DIFFICULT],
            )
            if choice is None:
                report = AdvancementReport(trait_key=skill.key)
                report.notes.append(f"{skill.name} test was not recorded.")
                return report
            if choice == APPLY_AS_ROUTINE:
                return self._advance_learning(character_key, skill)
            group = DifficultyGroup.DIFFICULT

        return self.record_root_stat_test(character_key, skill, group, success)

    def _advance_learning(self, character_key: str, skill: Trait) -> AdvancementReport:
        report = AdvancementReport(trait_key=skill.key)
        progress = skill.record.learning_progress + 1
        required = learning_tests_required(skill.aptitude, self.settings.learning_tests_default)

        if progress < required:
            self.store.update_learning_progress(character_key, skill.key, progress)
            report.recorded = DifficultyGroup.ROUTINE
            report.learning_progress = progress
            report.notes.append(f"{skill.name} learning progress {progress}/{required}.")
            return report

        report.eligible = True
        confirmed = self.prompts.confirm(
            f"Finish Training {skill.name}?",
            f"{skill.name} is ready to become a full skill. Go ahead?",
        )
        if not confirmed:
            report.notes.append(
                f"{skill.name} training not finished; the test was not recorded."
            )
            return report

        exponent = learning_start_exponent(required)
        fresh = skill.record.reset()
        self.store.update_trait(
            character_key,
            skill.key,
            learning=False,
            exponent=exponent,
            learning_progress=0,
            routine=fresh.routine,
            difficult=fresh.difficult,
            challenging=fresh.challenging,
        )
        report.recorded = DifficultyGroup.ROUTINE
        report.learning_progress = 0
        report.advanced = True
        report.graduated = True
        report.new_exponent = exponent
        report.notes.append(f"{skill.name} learned at exponent {exponent}.")
        logger.info(f"{character_key}: learned {skill.name} at exponent {exponent}")
        return report

    def record_root_stat_test(
        self,
        character_key: str,
        skill: Trait,
        group: DifficultyGroup,
        success: bool,
    ) -> AdvancementReport:
        """Credit a test to the skill's root stat.

        A skill with two roots lets the player pick which one.
        """
        roots = [
            root
            for root in (self.store.get_trait(character_key, key) for key in skill.root_traits)
            if root is not None
        ]
        if not roots:
            logger.warning(f"{character_key}/{skill.key} has no root stat to credit")
            report = AdvancementReport(trait_key=skill.key)
            report.notes.append(f"{skill.name} has no root stat to credit.")
            return report

        root = roots[0]
        if len(roots) > 1:
            choice = self.prompts.choose(
                "Pick root stat to advance",
                [r.name for r in roots],
            )
            if choice is None:
                report = AdvancementReport(trait_key=skill.key)
                report.notes.append(f"{skill.name} test was not recorded.")
                return report
            root = next(r for r in roots if r.name == choice)

        return self.record_stat_test(character_key, root, group, success)

    # ------------------------------------------------------------------
    # Tax
    # ------------------------------------------------------------------

    def commit_tax(
        self,
        character_key: str,
        trait: Trait,
        assessment: TaxAssessment,
    ) -> AdvancementReport:
        """Ask the player to accept a tax result, then write it."""
        report = AdvancementReport(trait_key=trait.key)
        untaxed = assessment.exponent - assessment.current_tax

        if assessment.overtaxed:
            confirmed = self.prompts.confirm(
                "Overtaxed!",
                f"Failing your tax test by {assessment.margin} when you have {untaxed} "
                f"untaxed {trait.name} dice has resulted in overtax. Your {trait.name} "
                f"will be maxed out as your character falls unconscious. Also apply a "
                f"B{assessment.wound_severity} wound to your character.",
            )
        else:
            confirmed = self.prompts.confirm(
                "Taxed",
                f"You failed your tax test! Your {trait.name} tax will increase by "
                f"{assessment.margin}. Any currently sustained spells are lost.",
            )

        if not confirmed:
            report.notes.append(f"{trait.name} tax left at {assessment.current_tax}.")
            return report

        self.store.update_tax(character_key, trait.key, assessment.new_tax)
        report.tax_committed = True
        report.notes.append(f"{trait.name} tax is now {assessment.new_tax}.")
        logger.info(
            f"{character_key}: {trait.name} tax {assessment.current_tax} -> {assessment.new_tax}"
            + (f" (overtaxed, B{assessment.wound_severity} wound)" if assessment.overtaxed else "")
        )
        return report

    def record_tax_test(
        self,
        character_key: str,
        trait: Trait,
        group: DifficultyGroup,
        success: bool,
        assessment: TaxAssessment | None,
    ) -> AdvancementReport:
        """Log a sustain test against the tax stat.

        A failed test settles tax first. Dismissing the tax prompt leaves
        the stat exactly as it was, test counters included. If the stat
        advances after an overtax, tax follows the new exponent.

        Args:
            character_key: Character making the test.
            trait: Tax stat snapshot from before the roll.
            group: Difficulty tier of the test.
            success: Whether the test passed.
            assessment: Tax consequence, None if the test passed.

        Returns:
            Combined report of the tax and stat steps.
        """
        if assessment is None:
            return self.record_stat_test(character_key, trait, group, success)

        report = self.commit_tax(character_key, trait, assessment)
        if not report.tax_committed:
            report.notes.append(f"{trait.name} test was not recorded.")
            return report

        taxed = self.store.get_trait(character_key, trait.key) or trait
        stat = self.record_stat_test(character_key, taxed, group, success)
        report.recorded = stat.recorded
        report.eligible = stat.eligible
        report.advanced = stat.advanced
        report.new_exponent = stat.new_exponent
        report.notes.extend(stat.notes)

        if assessment.overtaxed and stat.advanced:
            self.store.update_tax(character_key, trait.key, stat.new_exponent)
            report.notes.append(f"{trait.name} tax is now {stat.new_exponent}.")
            logger.info(
                f"{character_key}: overtaxed {trait.name} tax raised to {stat.new_exponent}"
            )
        return report
