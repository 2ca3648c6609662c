"""Advancement bookkeeping for stats, skills and beginner's luck."""

from burnroll.advancement.engine import AdvancementEngine, AdvancementReport
from burnroll.advancement.tax import TaxAssessment, assess_tax
from burnroll.advancement.rules import (
    TestsRequired,
    add_test,
    beginners_luck_exponent,
    can_advance,
    learning_start_exponent,
    learning_tests_required,
    tests_required,
)

__all__ = [
    "AdvancementEngine",
    "AdvancementReport",
    "TaxAssessment",
    "TestsRequired",
    "add_test",
    "assess_tax",
    "beginners_luck_exponent",
    "can_advance",
    "learning_start_exponent",
    "learning_tests_required",
    "tests_required",
]
