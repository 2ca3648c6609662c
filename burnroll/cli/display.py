"""Rich display helpers for CLI output."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from burnroll.dice.types import DieResult
from burnroll.rolls.types import RollReport
from burnroll.traits.types import CharacterCondition, Relationship, Trait, TraitKind


# Shared console instance
console = Console()


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{message}[/dim]")


def format_dice(dice: tuple[DieResult, ...]) -> str:
    """Render dice faces, successes in green and explosions marked with '!'."""
    if not dice:
        return "[dim]no dice[/dim]"
    parts = []
    for die in dice:
        face = f"{die.face}!" if die.exploded else str(die.face)
        parts.append(f"[green]{face}[/green]" if die.success else f"[red]{face}[/red]")
    return ", ".join(parts)


def _sources_table(title: str, sources: dict[str, str]) -> Table:
    table = Table(title=title, show_header=False, box=None, padding=(0, 1))
    table.add_column("Source", style="white")
    table.add_column("Amount", justify="right", style="cyan")
    for label, amount in sources.items():
        table.add_row(label, amount)
    return table


def display_roll_report(report: RollReport) -> None:
    """Display a roll result panel.

    Args:
        report: The roll report to show.
    """
    verdict = "[bold green]Success[/bold green]" if report.success else "[bold red]Failure[/bold red]"
    lines = [
        f"Dice: [{format_dice(report.dice)}]",
        f"Successes: [bold]{report.successes}[/bold] vs Ob {report.obstacle_total} "
        f"(nominal {report.difficulty})",
        f"Difficulty: [yellow]{report.difficulty_group.value}[/yellow]",
        f"Result: {verdict}",
    ]
    if report.extra_info:
        lines.append("")
        lines.append(report.extra_info)

    console.print(Panel("\n".join(lines), title=f"[bold cyan]{report.name}[/bold cyan]"))
    console.print(_sources_table("Dice", report.die_sources))
    if report.penalty_sources:
        console.print(_sources_table("Obstacle", report.penalty_sources))
    display_advancement_notes(report)


def display_advancement_notes(report: RollReport) -> None:
    """Display what the advancement step recorded."""
    for note in report.advancement_notes:
        display_info(note)


def display_character_sheet(
    name: str,
    condition: CharacterCondition,
    traits: list[Trait],
    relationships: list[Relationship],
) -> None:
    """Display a character's traits and advancement progress.

    Args:
        name: Character display name.
        condition: Wound penalties.
        traits: Trait snapshots to list.
        relationships: Relationships to list.
    """
    console.print(Panel(f"[bold cyan]{name}[/bold cyan]", style="cyan"))
    if condition.wound_dice or condition.ob_penalty:
        console.print(
            f"[red]Wounds: -{condition.wound_dice}D, +{condition.ob_penalty} Ob[/red]"
        )

    table = Table(title="Traits")
    table.add_column("Trait", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Exponent", justify="right")
    table.add_column("R/D/C", justify="center")
    table.add_column("Tax", justify="right")
    table.add_column("Notes")

    for trait in traits:
        record = trait.record
        exponent = f"{trait.shade.value}{trait.exponent}"
        if trait.open:
            exponent += " (open)"
        notes = []
        if trait.learning:
            notes.append(f"learning {record.learning_progress}/{trait.aptitude or '?'}")
        if trait.root_traits:
            notes.append("roots: " + "/".join(trait.root_traits))
        table.add_row(
            trait.name,
            trait.kind.value,
            "-" if trait.learning and trait.kind is TraitKind.SKILL else exponent,
            f"{record.routine}/{record.difficult}/{record.challenging}",
            str(record.tax) if record.tax else "",
            ", ".join(notes),
        )
    console.print(table)

    if relationships:
        rel_table = Table(title="Relationships")
        rel_table.add_column("Key", style="cyan")
        rel_table.add_column("Name")
        rel_table.add_column("Building", justify="right")
        for rel in relationships:
            rel_table.add_row(
                rel.key,
                rel.name,
                str(rel.building_progress) if rel.building else "",
            )
        console.print(rel_table)
