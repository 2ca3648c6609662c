"""Main CLI application for burnroll."""

import logging

import typer
from rich.logging import RichHandler

from burnroll.cli.commands import character, roll
from burnroll.cli.display import console, display_success
from burnroll.config import get_settings
from burnroll.database.connection import init_db

# Create main app
app = typer.Typer(
    name="burnroll",
    help="Burning Wheel test rolling and advancement tracking",
    add_completion=True,
)

# Add sub-commands
app.add_typer(character.app, name="character")
app.add_typer(roll.app, name="roll")


def configure_logging(debug: bool = False) -> None:
    """Send log records through rich at the configured level."""
    logging.basicConfig(
        level=logging.DEBUG if debug else get_settings().logging_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def init() -> None:
    """Create the character database tables."""
    init_db()
    display_success(f"Database ready at {get_settings().database_url}")


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Show debug logging"),
) -> None:
    """burnroll - roll Burning Wheel tests and track advancement.

    Use 'burnroll character create' to make a character, then
    'burnroll roll skill CHARACTER SKILL --ob N' to test.
    """
    configure_logging(debug)


if __name__ == "__main__":
    app()
