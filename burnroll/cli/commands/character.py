"""Character authoring commands."""

from typing import Optional

import typer

from burnroll.cli.display import (
    display_character_sheet,
    display_error,
    display_info,
    display_success,
)
from burnroll.database.connection import get_db_session, init_db
from burnroll.dice.types import Shade
from burnroll.managers.character_store import SqlCharacterStore
from burnroll.traits.ports import StoreWriteError
from burnroll.traits.types import ModifierTarget, TraitKind

app = typer.Typer(help="Build and inspect characters")


@app.command()
def create(
    key: str = typer.Argument(..., help="Character key (e.g., aldric)"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
) -> None:
    """Create a new character."""
    init_db()
    try:
        with get_db_session() as db:
            SqlCharacterStore(db).create_character(key, name)
    except (ValueError, StoreWriteError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(f"Created character '{key}'")
    display_info(f"Use 'burnroll character add-trait {key} ...' to give them stats and skills")


@app.command()
def show(
    key: str = typer.Argument(..., help="Character key"),
) -> None:
    """Show a character's traits and advancement progress."""
    with get_db_session() as db:
        store = SqlCharacterStore(db)
        character = store.get_character(key)
        if character is None:
            display_error(f"Character '{key}' not found")
            raise typer.Exit(1)

        display_character_sheet(
            character.name,
            store.get_condition(key),
            store.list_traits(key),
            store.list_relationships(key),
        )


@app.command("add-trait")
def add_trait(
    character: str = typer.Argument(..., help="Character key"),
    trait: str = typer.Argument(..., help="Trait key (e.g., will, sword)"),
    exponent: int = typer.Argument(0, help="Exponent"),
    kind: TraitKind = typer.Option(TraitKind.STAT, "--kind", "-k", help="stat, skill or attribute"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    shade: Shade = typer.Option(Shade.BLACK, "--shade", help="B, G or W"),
    open_ended: bool = typer.Option(False, "--open", help="Rolls are open-ended"),
    aptitude: Optional[int] = typer.Option(None, "--aptitude", help="Tests needed to learn"),
    root: Optional[list[str]] = typer.Option(None, "--root", help="Root stat key (up to two)"),
    learning: bool = typer.Option(False, "--learning", help="Not yet learned (beginner's luck)"),
) -> None:
    """Add a stat, skill or attribute to a character."""
    try:
        with get_db_session() as db:
            added = SqlCharacterStore(db).add_trait(
                character,
                trait,
                name=name,
                kind=kind,
                exponent=exponent,
                shade=shade,
                open_ended=open_ended,
                aptitude=aptitude,
                roots=tuple(root or ()),
                learning=learning,
            )
    except (ValueError, StoreWriteError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(f"Added {added.name} ({added.shade.value}{added.exponent}) to '{character}'")


@app.command("add-relationship")
def add_relationship(
    character: str = typer.Argument(..., help="Character key"),
    relationship: str = typer.Argument(..., help="Relationship key"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    building: bool = typer.Option(False, "--building", help="Still being built"),
) -> None:
    """Add a relationship usable as a named contact."""
    try:
        with get_db_session() as db:
            added = SqlCharacterStore(db).add_relationship(
                character, relationship, name=name, building=building
            )
    except (ValueError, StoreWriteError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(f"Added relationship {added.name} to '{character}'")


@app.command("add-modifier")
def add_modifier(
    character: str = typer.Argument(..., help="Character key"),
    trait: str = typer.Argument(..., help="Trait key"),
    name: str = typer.Argument(..., help="Modifier label"),
    amount: int = typer.Argument(..., help="Signed dice or obstacle amount"),
    target: ModifierTarget = typer.Option(ModifierTarget.DICE, "--target", "-t", help="dice or obstacle"),
    optional: bool = typer.Option(False, "--optional", help="Apply only when selected with --modifier"),
) -> None:
    """Add a standing roll modifier to a trait."""
    try:
        with get_db_session() as db:
            SqlCharacterStore(db).add_modifier(
                character, trait, name, amount, target=target, optional=optional
            )
    except (ValueError, StoreWriteError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(f"Added {name} ({amount:+d} {target.value}) to {character}/{trait}")


@app.command()
def condition(
    character: str = typer.Argument(..., help="Character key"),
    wound_dice: Optional[int] = typer.Option(None, "--wound-dice", "-w", help="Dice lost to wounds"),
    ob_penalty: Optional[int] = typer.Option(None, "--ob-penalty", "-o", help="Obstacle added by wounds"),
) -> None:
    """Set a character's wound penalties."""
    try:
        with get_db_session() as db:
            updated = SqlCharacterStore(db).set_condition(
                character, wound_dice=wound_dice, ob_penalty=ob_penalty
            )
    except (ValueError, StoreWriteError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(
        f"{character}: -{updated.wound_dice}D, +{updated.ob_penalty} Ob from wounds"
    )
