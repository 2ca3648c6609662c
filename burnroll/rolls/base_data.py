"""Normalization of raw roll inputs.

Turns what the player typed or checked into a BaseRollData snapshot and
builds the label maps shown in the roll breakdown. Bad numbers never stop
a roll: they count as 0.
"""

import re
from typing import Iterable, Mapping

from burnroll.rolls.types import BaseRollData, RawNumber, RollRequest
from burnroll.traits.types import CharacterCondition, RollModifier

LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: RawNumber) -> int:
    """Parse a player-entered number, falling back to 0.

    Leading digits count, so a half-typed "2d" or "3.5" reads as 2 or 3.

    Examples:
        >>> parse_int("3")
        3
        >>> parse_int(" -2 ")
        -2
        >>> parse_int("3.5")
        3
        >>> parse_int("three")
        0
        >>> parse_int(None)
        0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    match = LEADING_INT.match(str(value))
    if match is None:
        return 0
    return int(match.group(1))


def signed(amount: int) -> str:
    """Format an amount with an explicit sign for the breakdown."""
    return f"+{amount}" if amount >= 0 else str(amount)


def sum_checked_options(options: Mapping[str, RawNumber]) -> tuple[int, dict[str, str]]:
    """Sum checked bonus options and label each one.

    Returns:
        Tuple of (total, label -> signed amount).
    """
    total = 0
    labels: dict[str, str] = {}
    for name, raw in options.items():
        amount = parse_int(raw)
        total += amount
        labels[name] = signed(amount)
    return total, labels


def _applied_modifiers(
    modifiers: Iterable[RollModifier],
    selected: Iterable[str],
) -> list[RollModifier]:
    chosen = set(selected)
    return [m for m in modifiers if not m.optional or m.name in chosen]


def extract_base_data(
    request: RollRequest,
    condition: CharacterCondition,
    modifiers: Iterable[RollModifier] = (),
) -> BaseRollData:
    """Build the per-attempt snapshot for a roll.

    Args:
        request: Raw player input.
        condition: Current wound penalties of the character.
        modifiers: Modifiers available for this trait. Automatic ones always
            apply; optional ones only when selected in the request.

    Returns:
        BaseRollData with the computed obstacle total.
    """
    ob_penalty = condition.ob_penalty or 0
    penalty_sources = {"Wound Penalty": signed(ob_penalty)} if ob_penalty else {}

    misc_dice = 0
    misc_dice_sources: dict[str, str] = {}
    misc_obstacle = 0
    misc_obstacle_sources: dict[str, str] = {}
    for modifier in _applied_modifiers(modifiers, request.selected_modifiers):
        if modifier.applies_to_dice:
            misc_dice += modifier.amount
            misc_dice_sources[modifier.name] = signed(modifier.amount)
        else:
            misc_obstacle += modifier.amount
            misc_obstacle_sources[modifier.name] = signed(modifier.amount)

    return BaseRollData(
        wound_dice=condition.wound_dice or 0,
        ob_penalty=ob_penalty,
        difficulty=parse_int(request.difficulty),
        bonus_dice=parse_int(request.bonus_dice),
        artha_dice=parse_int(request.artha_dice),
        misc_dice=misc_dice,
        misc_dice_sources=misc_dice_sources,
        misc_obstacle=misc_obstacle,
        misc_obstacle_sources=misc_obstacle_sources,
        penalty_sources=penalty_sources,
    )


def build_dice_sources(
    exponent: int,
    artha_dice: int = 0,
    bonus_dice: int = 0,
    wound_dice: int = 0,
    tax: int = 0,
) -> dict[str, str]:
    """Label where the dice in a pool came from.

    Only non-zero contributions beyond the exponent are listed.

    Examples:
        >>> build_dice_sources(4, bonus_dice=1, wound_dice=2)
        {'Exponent': '+4', 'Bonus': '+1', 'Wound Penalty': '-2'}
    """
    sources = {"Exponent": f"+{exponent}"}
    if artha_dice:
        sources["Artha"] = signed(artha_dice)
    if bonus_dice:
        sources["Bonus"] = signed(bonus_dice)
    if wound_dice:
        sources["Wound Penalty"] = f"-{wound_dice}"
    if tax:
        sources["Tax"] = f"-{tax}"
    return sources
