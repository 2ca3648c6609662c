"""Tests for the advancement engine."""

import pytest

from burnroll.advancement.engine import APPLY_AS_DIFFICULT, APPLY_AS_ROUTINE, AdvancementEngine
from burnroll.advancement.tax import TaxAssessment
from burnroll.dice.types import DifficultyGroup
from tests.factories import ScriptedPrompts, create_skill, create_trait


def make_engine(store, prompts, settings):
    return AdvancementEngine(store, prompts, settings)


@pytest.fixture
def will(db_session, character):
    """B3 Will with no tests logged."""
    create_trait(db_session, character, trait_key="will", name="Will", exponent=3)
    return "will"


class TestRecordStatTest:
    """Tests for logging stat tests."""

    def test_records_one_increment(self, store, prompts, settings, character, will):
        """Test that a difficult test shows up as one difficult increment."""
        engine = make_engine(store, prompts, settings)
        trait = store.get_trait("aldric", will)

        report = engine.record_stat_test("aldric", trait, DifficultyGroup.DIFFICULT, True)

        record = store.get_trait("aldric", will).record
        assert (record.routine, record.difficult, record.challenging) == (0, 1, 0)
        assert report.recorded is DifficultyGroup.DIFFICULT
        assert not report.eligible
        assert prompts.confirm_calls == []

    def test_failures_count_too(self, store, prompts, settings, character, will):
        """Test that a failed test is still logged."""
        engine = make_engine(store, prompts, settings)

        engine.record_stat_test("aldric", store.get_trait("aldric", will), DifficultyGroup.CHALLENGING, False)

        assert store.get_trait("aldric", will).record.challenging == 1

    def test_routine_never_makes_a_stat_eligible(self, db_session, store, prompts, settings, character):
        """Test that stats ignore routine tests for eligibility."""
        create_trait(db_session, character, trait_key="perception", name="Perception",
                     exponent=2, routine=1, challenging=1)
        engine = make_engine(store, prompts, settings)

        report = engine.record_stat_test(
            "aldric", store.get_trait("aldric", "perception"), DifficultyGroup.ROUTINE, True
        )

        assert not report.eligible
        assert store.get_trait("aldric", "perception").record.routine == 2

    def test_confirmed_advancement(self, db_session, store, settings, character):
        """Test that confirming advancement raises the exponent and resets counters."""
        create_trait(db_session, character, trait_key="will", name="Will",
                     exponent=3, difficult=2, tax=1)
        prompts = ScriptedPrompts(confirms=[True])
        engine = make_engine(store, prompts, settings)

        report = engine.record_stat_test(
            "aldric", store.get_trait("aldric", "will"), DifficultyGroup.CHALLENGING, True
        )

        trait = store.get_trait("aldric", "will")
        assert report.eligible and report.advanced
        assert report.new_exponent == 4
        assert trait.exponent == 4
        assert trait.record.total_tests == 0
        assert trait.record.tax == 1
        assert prompts.confirm_calls[0][0] == "Advance Will?"

    def test_declined_advancement_leaves_counters_untouched(self, db_session, store, prompts, settings, character):
        """Test that declining advancement writes nothing."""
        create_trait(db_session, character, trait_key="will", name="Will",
                     exponent=3, difficult=2)
        engine = make_engine(store, prompts, settings)

        report = engine.record_stat_test(
            "aldric", store.get_trait("aldric", "will"), DifficultyGroup.CHALLENGING, True
        )

        trait = store.get_trait("aldric", "will")
        assert report.eligible and not report.advanced
        assert report.recorded is None
        assert trait.exponent == 3
        assert (trait.record.difficult, trait.record.challenging) == (2, 0)

    def test_ambiguous_choice(self, store, settings, character, will):
        """Test that the player picks the bucket for an ambiguous test."""
        prompts = ScriptedPrompts(choices=["Difficult"])
        engine = make_engine(store, prompts, settings)

        report = engine.record_stat_test(
            "aldric", store.get_trait("aldric", will), DifficultyGroup.ROUTINE_OR_DIFFICULT, True
        )

        assert prompts.choose_calls == [("Pick where to assign the Will test", ["Routine", "Difficult"])]
        assert report.recorded is DifficultyGroup.DIFFICULT
        assert store.get_trait("aldric", will).record.difficult == 1

    def test_dismissed_ambiguous_choice(self, store, prompts, settings, character, will):
        """Test that dismissing the bucket choice records nothing."""
        engine = make_engine(store, prompts, settings)

        report = engine.record_stat_test(
            "aldric", store.get_trait("aldric", will), DifficultyGroup.ROUTINE_OR_DIFFICULT, True
        )

        assert report.recorded is None
        assert store.get_trait("aldric", will).record.total_tests == 0

    def test_exponent_zero_advances_on_any_test(self, db_session, store, settings, character):
        """Test that a zero exponent trait is eligible after one test."""
        create_trait(db_session, character, trait_key="faith", name="Faith", exponent=0)
        prompts = ScriptedPrompts(confirms=[True])
        engine = make_engine(store, prompts, settings)

        report = engine.record_stat_test(
            "aldric", store.get_trait("aldric", "faith"), DifficultyGroup.ROUTINE, True
        )

        assert report.advanced
        assert store.get_trait("aldric", "faith").exponent == 1


class TestRecordSkillTest:
    """Tests for logging skill tests."""

    def test_routine_tests_advance_skills(self, db_session, store, settings, character):
        """Test that routine tests count toward skill advancement."""
        create_skill(db_session, character, trait_key="sword", name="Sword",
                     exponent=2, routine=1, challenging=1)
        prompts = ScriptedPrompts(confirms=[True])
        engine = make_engine(store, prompts, settings)

        report = engine.record_skill_test(
            "aldric", store.get_trait("aldric", "sword"), DifficultyGroup.ROUTINE, True
        )

        assert report.advanced
        assert store.get_trait("aldric", "sword").exponent == 3

    def test_routine_not_applicable_at_five(self, db_session, store, prompts, settings, character):
        """Test that routine tests at exponent 5 are not logged."""
        create_skill(db_session, character, trait_key="sword", name="Sword", exponent=5)
        engine = make_engine(store, prompts, settings)

        report = engine.record_skill_test(
            "aldric", store.get_trait("aldric", "sword"), DifficultyGroup.ROUTINE, True
        )

        assert report.recorded is None
        assert "no longer count" in report.notes[0]
        assert store.get_trait("aldric", "sword").record.routine == 0


class TestRecordLearningTest:
    """Tests for the beginner's luck path."""

    @pytest.fixture
    def skill(self, db_session, character):
        create_trait(db_session, character, trait_key="will", name="Will", exponent=3)
        create_trait(db_session, character, trait_key="perception", name="Perception", exponent=4)
        create_skill(db_session, character, trait_key="sorcery", name="Sorcery",
                     exponent=0, learning=True, aptitude=4, root1="will")
        return "sorcery"

    def test_routine_adds_learning_progress(self, store, prompts, settings, skill):
        """Test that a routine test moves learning progress by one."""
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", skill), DifficultyGroup.ROUTINE, True
        )

        assert report.learning_progress == 1
        assert store.get_trait("aldric", skill).record.learning_progress == 1

    def test_graduation_at_aptitude(self, db_session, store, settings, character, skill):
        """Test that reaching aptitude 4 learns the skill at exponent 3."""
        store.update_learning_progress("aldric", skill, 3)
        prompts = ScriptedPrompts(confirms=[True])
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", skill), DifficultyGroup.ROUTINE, True
        )

        trait = store.get_trait("aldric", skill)
        assert report.eligible and report.graduated
        assert report.new_exponent == 3
        assert not trait.learning
        assert trait.exponent == 3
        assert trait.record.learning_progress == 0
        assert prompts.confirm_calls[0][0] == "Finish Training Sorcery?"

    def test_declined_graduation_leaves_progress(self, store, prompts, settings, skill):
        """Test that declining graduation writes nothing."""
        store.update_learning_progress("aldric", skill, 3)
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", skill), DifficultyGroup.ROUTINE, True
        )

        trait = store.get_trait("aldric", skill)
        assert report.eligible and not report.graduated
        assert trait.learning
        assert trait.record.learning_progress == 3

    def test_difficult_goes_to_root(self, store, prompts, settings, skill):
        """Test that a difficult test is credited to the root stat."""
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", skill), DifficultyGroup.DIFFICULT, False
        )

        assert report.trait_key == "will"
        assert store.get_trait("aldric", "will").record.difficult == 1
        assert store.get_trait("aldric", skill).record.learning_progress == 0

    def test_ambiguous_apply_as_routine(self, store, settings, skill):
        """Test that the player can count an ambiguous test as learning."""
        prompts = ScriptedPrompts(choices=[APPLY_AS_ROUTINE])
        engine = make_engine(store, prompts, settings)

        engine.record_learning_test(
            "aldric", store.get_trait("aldric", skill), DifficultyGroup.ROUTINE_OR_DIFFICULT, True
        )

        assert store.get_trait("aldric", skill).record.learning_progress == 1
        assert store.get_trait("aldric", "will").record.total_tests == 0

    def test_ambiguous_apply_as_difficult(self, store, settings, skill):
        """Test that the player can send an ambiguous test to the root stat."""
        prompts = ScriptedPrompts(choices=[APPLY_AS_DIFFICULT])
        engine = make_engine(store, prompts, settings)

        engine.record_learning_test(
            "aldric", store.get_trait("aldric", skill), DifficultyGroup.ROUTINE_OR_DIFFICULT, True
        )

        assert store.get_trait("aldric", skill).record.learning_progress == 0
        assert store.get_trait("aldric", "will").record.difficult == 1

    def test_dual_roots_ask_which_stat(self, db_session, store, settings, character, skill):
        """Test that a skill with two roots lets the player pick one."""
        create_skill(db_session, character, trait_key="observation", name="Observation",
                     learning=True, exponent=0, root1="will", root2="perception")
        prompts = ScriptedPrompts(choices=["Perception"])
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", "observation"), DifficultyGroup.CHALLENGING, True
        )

        assert prompts.choose_calls == [("Pick root stat to advance", ["Will", "Perception"])]
        assert report.trait_key == "perception"
        assert store.get_trait("aldric", "perception").record.challenging == 1
        assert store.get_trait("aldric", "will").record.challenging == 0

    def test_dismissed_root_choice(self, db_session, store, prompts, settings, character, skill):
        """Test that dismissing the root choice records nothing."""
        create_skill(db_session, character, trait_key="observation", name="Observation",
                     learning=True, exponent=0, root1="will", root2="perception")
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", "observation"), DifficultyGroup.CHALLENGING, True
        )

        assert report.recorded is None
        assert store.get_trait("aldric", "will").record.total_tests == 0
        assert store.get_trait("aldric", "perception").record.total_tests == 0

    def test_no_root(self, db_session, store, prompts, settings, character):
        """Test that a rootless skill logs nothing for hard tests."""
        create_skill(db_session, character, trait_key="oddity", name="Oddity", learning=True)
        engine = make_engine(store, prompts, settings)

        report = engine.record_learning_test(
            "aldric", store.get_trait("aldric", "oddity"), DifficultyGroup.DIFFICULT, True
        )

        assert report.recorded is None
        assert "no root stat" in report.notes[0]


class TestCommitTax:
    """Tests for tax confirmation."""

    @pytest.fixture
    def forte(self, db_session, character):
        create_trait(db_session, character, trait_key="forte", name="Forte", exponent=2, tax=1)
        return "forte"

    def test_confirmed_overtax(self, store, settings, forte):
        """Test that accepting overtax maxes out the tax."""
        prompts = ScriptedPrompts(confirms=[True])
        engine = make_engine(store, prompts, settings)
        assessment = TaxAssessment(margin=4, current_tax=1, exponent=2, obstacle_total=5)

        report = engine.commit_tax("aldric", store.get_trait("aldric", forte), assessment)

        assert report.tax_committed
        assert store.get_trait("aldric", forte).record.tax == 2
        title, body = prompts.confirm_calls[0]
        assert title == "Overtaxed!"
        assert "B15" in body

    def test_confirmed_tax(self, db_session, store, settings, character):
        """Test that accepting tax adds the margin."""
        create_trait(db_session, character, trait_key="forte", name="Forte", exponent=5, tax=1)
        prompts = ScriptedPrompts(confirms=[True])
        engine = make_engine(store, prompts, settings)
        assessment = TaxAssessment(margin=2, current_tax=1, exponent=5, obstacle_total=3)

        engine.commit_tax("aldric", store.get_trait("aldric", "forte"), assessment)

        assert prompts.confirm_calls[0][0] == "Taxed"
        assert store.get_trait("aldric", "forte").record.tax == 3

    def test_dismissed_tax_leaves_tax(self, store, prompts, settings, forte):
        """Test that dismissing the overtax prompt leaves tax as it was."""
        engine = make_engine(store, prompts, settings)
        assessment = TaxAssessment(margin=4, current_tax=1, exponent=2, obstacle_total=5)

        report = engine.commit_tax("aldric", store.get_trait("aldric", forte), assessment)

        assert not report.tax_committed
        assert store.get_trait("aldric", forte).record.tax == 1
