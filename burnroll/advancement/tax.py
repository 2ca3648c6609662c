"""Tax consequences of failed sustain tests.

A failed tax test costs dice equal to the margin of failure. When the
stat cannot pay, the caster is overtaxed: the tax maxes out at the
stat's exponent and the excess comes back as a wound.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaxAssessment:
    """Consequence of a failed tax test, computed before any commit.

    Attributes:
        margin: Obstacle total minus successes.
        current_tax: Tax before the test.
        exponent: Exponent of the taxed stat.
        obstacle_total: Obstacle of the tax test.

    Examples:
        >>> a = TaxAssessment(margin=4, current_tax=1, exponent=2, obstacle_total=5)
        >>> a.overtaxed, a.new_tax, a.wound_severity
        (True, 2, 15)
    """

    margin: int
    current_tax: int
    exponent: int
    obstacle_total: int

    @property
    def overtaxed(self) -> bool:
        return self.exponent < self.margin + self.current_tax

    @property
    def new_tax(self) -> int:
        """Tax after the failure. Overtax maxes it out at the exponent."""
        if self.overtaxed:
            return self.exponent
        return self.current_tax + self.margin

    @property
    def wound_severity(self) -> int:
        """Severity of the wound an overtaxed caster suffers (0 if none)."""
        if not self.overtaxed:
            return 0
        return (self.margin + self.current_tax - self.exponent) * self.obstacle_total


def assess_tax(exponent: int, current_tax: int, obstacle_total: int, successes: int) -> TaxAssessment | None:
    """Compute the tax consequence of a test, None if the test passed."""
    if successes >= obstacle_total:
        return None
    return TaxAssessment(
        margin=obstacle_total - successes,
        current_tax=current_tax,
        exponent=exponent,
        obstacle_total=obstacle_total,
    )
