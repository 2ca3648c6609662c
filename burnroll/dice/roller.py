"""Core dice rolling engine.

Rolls pools of d6 where every die is judged on its own against the
shade's success threshold. Open-ended rolls add another die for every 6
shown, and keep doing so for as long as sixes come up.
"""

import logging
import random

from burnroll.dice.types import DIE_FACES, DieResult, RollOutcome, Shade


logger = logging.getLogger(__name__)


def _roll_die(shade: Shade, exploded: bool = False) -> DieResult:
    face = random.randint(1, DIE_FACES)
    return DieResult(face=face, success=face >= shade.threshold, exploded=exploded)


def roll_dice(
    pool_size: int,
    open: bool = False,
    shade: Shade = Shade.BLACK,
) -> RollOutcome:
    """Roll a pool of d6 and count successes.

    Args:
        pool_size: Number of dice to roll. Negative values are clamped to 0.
        open: Whether sixes explode into additional dice.
        shade: Shade of the trait; sets the success threshold.

    Returns:
        RollOutcome with every die rolled. An empty pool gives zero successes.

    Examples:
        >>> outcome = roll_dice(4)
        >>> len(outcome.dice) >= 4
        True
        >>> roll_dice(-2).successes
        0
    """
    pool_size = max(0, pool_size)
    dice: list[DieResult] = []

    for _ in range(pool_size):
        die = _roll_die(shade)
        dice.append(die)
        # Each six on an open roll chains one more die
        while open and die.face == DIE_FACES:
            die = _roll_die(shade, exploded=True)
            dice.append(die)

    outcome = RollOutcome(pool_size=pool_size, open=open, shade=shade, dice=tuple(dice))
    logger.debug(
        f"Rolled {pool_size}D{' open' if open else ''} shade {shade.value}: "
        f"{list(outcome.faces)} -> {outcome.successes} successes"
    )
    return outcome
