"""Prompt surfaces for the CLI."""

from typing import Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from burnroll.cli.display import console as default_console


class RichPromptSurface:
    """Asks the player at the terminal.

    Choices are numbered from 1; answering 0 dismisses the prompt.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def confirm(self, title: str, body: str) -> bool:
        self.console.print(f"\n[bold yellow]{title}[/bold yellow]")
        self.console.print(body)
        return Confirm.ask("Confirm", console=self.console, default=False)

    def choose(self, title: str, options: Sequence[str]) -> str | None:
        self.console.print(f"\n[bold yellow]{title}[/bold yellow]")
        for i, option in enumerate(options, 1):
            self.console.print(f"  [cyan]{i}[/cyan]. {option}")
        self.console.print("  [dim]0. Dismiss[/dim]")

        answer = Prompt.ask(
            "Choice",
            console=self.console,
            choices=[str(i) for i in range(len(options) + 1)],
            default="1",
        )
        index = int(answer)
        if index == 0:
            return None
        return options[index - 1]


class AutoPromptSurface:
    """Answers every prompt the same way, for --yes / --no runs.

    Accepting picks the first option of a choice; declining dismisses it.
    """

    def __init__(self, accept: bool) -> None:
        self.accept = accept

    def confirm(self, title: str, body: str) -> bool:
        return self.accept

    def choose(self, title: str, options: Sequence[str]) -> str | None:
        if not self.accept or not options:
            return None
        return options[0]
