"""Roll commands."""

from typing import Optional

import typer

from burnroll.cli.display import display_advancement_notes, display_error, display_roll_report
from burnroll.cli.prompts import AutoPromptSurface, RichPromptSurface
from burnroll.config import get_settings
from burnroll.database.connection import get_db_session
from burnroll.managers.character_store import SqlCharacterStore
from burnroll.rolls.dispatcher import RollDispatcher
from burnroll.rolls.types import RollCategory, RollRequest, RollValidationError
from burnroll.traits.ports import PromptSurface, StoreWriteError

app = typer.Typer(help="Roll tests")


def parse_options(values: list[str] | None) -> dict[str, str]:
    """Parse NAME=N option values. A bare NAME counts as 1.

    Examples:
        >>> parse_options(["Swords=1", "Knives"])
        {'Swords': '1', 'Knives': '1'}
    """
    options: dict[str, str] = {}
    for value in values or []:
        name, _, amount = value.partition("=")
        options[name.strip()] = amount.strip() or "1"
    return options


def _prompts(answer: bool | None) -> PromptSurface:
    if answer is None:
        return RichPromptSurface()
    return AutoPromptSurface(answer)


def _run(request: RollRequest, answer: bool | None) -> None:
    try:
        with get_db_session() as db:
            dispatcher = RollDispatcher(SqlCharacterStore(db), _prompts(answer))
            report = dispatcher.roll(request, on_resolved=display_roll_report)
            display_advancement_notes(report)
    except RollValidationError as e:
        display_error(str(e))
        raise typer.Exit(1)
    except StoreWriteError as e:
        display_error(f"Could not save the result: {e}")
        raise typer.Exit(1)


def _obstacle(ob: str | None) -> str | int:
    return ob if ob is not None else get_settings().default_obstacle


@app.command()
def stat(
    character: str = typer.Argument(..., help="Character key"),
    trait: str = typer.Argument(..., help="Stat key (e.g., will)"),
    ob: Optional[str] = typer.Option(None, "--ob", help="Obstacle"),
    bonus: Optional[str] = typer.Option(None, "--bonus", "-b", help="Bonus dice"),
    artha: Optional[str] = typer.Option(None, "--artha", "-a", help="Artha dice"),
    modifier: Optional[list[str]] = typer.Option(None, "--modifier", "-m", help="Optional modifier to apply"),
    answer: Optional[bool] = typer.Option(None, "--yes/--no", help="Answer every prompt"),
) -> None:
    """Roll a stat test."""
    _run(
        RollRequest(
            category=RollCategory.STAT,
            character_key=character,
            trait_key=trait,
            difficulty=_obstacle(ob),
            bonus_dice=bonus,
            artha_dice=artha,
            selected_modifiers=tuple(modifier or ()),
        ),
        answer,
    )


@app.command()
def attribute(
    character: str = typer.Argument(..., help="Character key"),
    trait: str = typer.Argument(..., help="Attribute key (e.g., resources)"),
    ob: Optional[str] = typer.Option(None, "--ob", help="Obstacle"),
    bonus: Optional[str] = typer.Option(None, "--bonus", "-b", help="Bonus dice"),
    artha: Optional[str] = typer.Option(None, "--artha", "-a", help="Artha dice"),
    modifier: Optional[list[str]] = typer.Option(None, "--modifier", "-m", help="Optional modifier to apply"),
    answer: Optional[bool] = typer.Option(None, "--yes/--no", help="Answer every prompt"),
) -> None:
    """Roll an attribute test."""
    _run(
        RollRequest(
            category=RollCategory.ATTRIBUTE,
            character_key=character,
            trait_key=trait,
            difficulty=_obstacle(ob),
            bonus_dice=bonus,
            artha_dice=artha,
            selected_modifiers=tuple(modifier or ()),
        ),
        answer,
    )


@app.command()
def skill(
    character: str = typer.Argument(..., help="Character key"),
    trait: str = typer.Argument(..., help="Skill key (e.g., sword)"),
    ob: Optional[str] = typer.Option(None, "--ob", help="Obstacle"),
    bonus: Optional[str] = typer.Option(None, "--bonus", "-b", help="Bonus dice"),
    artha: Optional[str] = typer.Option(None, "--artha", "-a", help="Artha dice"),
    modifier: Optional[list[str]] = typer.Option(None, "--modifier", "-m", help="Optional modifier to apply"),
    fork: Optional[list[str]] = typer.Option(None, "--fork", "-f", help="FoRK as NAME=DICE"),
    answer: Optional[bool] = typer.Option(None, "--yes/--no", help="Answer every prompt"),
) -> None:
    """Roll a skill test."""
    _run(
        RollRequest(
            category=RollCategory.SKILL,
            character_key=character,
            trait_key=trait,
            difficulty=_obstacle(ob),
            bonus_dice=bonus,
            artha_dice=artha,
            selected_modifiers=tuple(modifier or ()),
            forks=parse_options(fork),
        ),
        answer,
    )


@app.command()
def learning(
    character: str = typer.Argument(..., help="Character key"),
    trait: str = typer.Argument(..., help="Unlearned skill key"),
    ob: Optional[str] = typer.Option(None, "--ob", help="Obstacle"),
    bonus: Optional[str] = typer.Option(None, "--bonus", "-b", help="Bonus dice"),
    artha: Optional[str] = typer.Option(None, "--artha", "-a", help="Artha dice"),
    modifier: Optional[list[str]] = typer.Option(None, "--modifier", "-m", help="Optional modifier to apply"),
    answer: Optional[bool] = typer.Option(None, "--yes/--no", help="Answer every prompt"),
) -> None:
    """Roll a beginner's luck test."""
    _run(
        RollRequest(
            category=RollCategory.LEARNING,
            character_key=character,
            trait_key=trait,
            difficulty=_obstacle(ob),
            bonus_dice=bonus,
            artha_dice=artha,
            selected_modifiers=tuple(modifier or ()),
        ),
        answer,
    )


@app.command()
def circles(
    character: str = typer.Argument(..., help="Character key"),
    ob: Optional[str] = typer.Option(None, "--ob", help="Obstacle"),
    bonus: Optional[str] = typer.Option(None, "--bonus", "-b", help="Bonus dice"),
    artha: Optional[str] = typer.Option(None, "--artha", "-a", help="Artha dice"),
    circles_bonus: Optional[list[str]] = typer.Option(None, "--circles-bonus", help="Bonus as NAME=DICE"),
    circles_malus: Optional[list[str]] = typer.Option(None, "--circles-malus", help="Malus as NAME=OB"),
    relationship: Optional[str] = typer.Option(None, "--relationship", "-r", help="Named contact key"),
    answer: Optional[bool] = typer.Option(None, "--yes/--no", help="Answer every prompt"),
) -> None:
    """Roll a circles test."""
    _run(
        RollRequest(
            category=RollCategory.CIRCLES,
            character_key=character,
            difficulty=_obstacle(ob),
            bonus_dice=bonus,
            artha_dice=artha,
            circles_bonuses=parse_options(circles_bonus),
            circles_maluses=parse_options(circles_malus),
            relationship_key=relationship,
        ),
        answer,
    )


@app.command()
def tax(
    character: str = typer.Argument(..., help="Character key"),
    spell: Optional[str] = typer.Option(None, "--spell", "-s", help="Spell being sustained"),
    ob: Optional[str] = typer.Option(None, "--ob", help="Obstacle"),
    stat_key: Optional[str] = typer.Option(None, "--stat", help="Stat paying the tax"),
    bonus: Optional[str] = typer.Option(None, "--bonus", "-b", help="Bonus dice"),
    artha: Optional[str] = typer.Option(None, "--artha", "-a", help="Artha dice"),
    answer: Optional[bool] = typer.Option(None, "--yes/--no", help="Answer every prompt"),
) -> None:
    """Roll a tax test to sustain a spell."""
    _run(
        RollRequest(
            category=RollCategory.TAX,
            character_key=character,
            trait_key=stat_key or "",
            difficulty=ob,
            bonus_dice=bonus,
            artha_dice=artha,
            spell_name=spell,
        ),
        answer,
    )
