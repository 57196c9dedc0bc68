"""Rich consoles and output helpers shared by the commands."""

from collections.abc import Iterable
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

redip_theme = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "word": "magenta",
        "source": "blue",
        "dim": "dim",
    }
)

console = Console(theme=redip_theme)

# Errors go to stderr so word lists can be piped
error_console = Console(theme=redip_theme, stderr=True)


def fail(message: object, code: int = 1) -> NoReturn:
    """Print an error and end the command."""
    error_console.print(f"[error]{message}[/]")
    raise typer.Exit(code)


def word_table(title: str, words: Iterable[str]) -> Table:
    table = Table(title=title)
    table.add_column("Word", style="word")
    for word in sorted(words):
        table.add_row(word)
    return table
