"""Tests for tax assessment."""

from burnroll.advancement.tax import TaxAssessment, assess_tax


class TestTaxAssessment:
    """Tests for tax consequences."""

    def test_overtax(self):
        """Test exponent 2, tax 1, margin 4 is overtaxed."""
        assessment = TaxAssessment(margin=4, current_tax=1, exponent=2, obstacle_total=5)

        assert assessment.overtaxed
        assert assessment.new_tax == 2
        assert assessment.wound_severity == (4 + 1 - 2) * 5

    def test_taxed_within_exponent(self):
        """Test that a small margin adds to the tax."""
        assessment = TaxAssessment(margin=1, current_tax=1, exponent=5, obstacle_total=3)

        assert not assessment.overtaxed
        assert assessment.new_tax == 2
        assert assessment.wound_severity == 0

    def test_exactly_maxed_is_not_overtaxed(self):
        """Test that margin plus tax equal to the exponent is not overtax."""
        assessment = TaxAssessment(margin=3, current_tax=1, exponent=4, obstacle_total=4)

        assert not assessment.overtaxed
        assert assessment.new_tax == 4


class TestAssessTax:
    """Tests for building assessments from results."""

    def test_passed_test_has_no_tax(self):
        """Test that meeting the obstacle costs nothing."""
        assert assess_tax(exponent=4, current_tax=0, obstacle_total=3, successes=3) is None

    def test_failed_test_margin(self):
        """Test that the margin is obstacle minus successes."""
        assessment = assess_tax(exponent=4, current_tax=0, obstacle_total=5, successes=2)

        assert assessment == TaxAssessment(margin=3, current_tax=0, exponent=4, obstacle_total=5)
