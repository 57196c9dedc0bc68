"""Main CLI application entry point."""

import typer

from redip.cli.commands import status, words
from redip.logging_config import setup_logging

app = typer.Typer(
    name="redip",
    help="Remote dictionaries for tokenizers: fetch, add and watch word lists",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def startup() -> None:
    """Configure logging before any command runs."""
    setup_logging()


app.command(name="words", help="Print the word list of a domain")(words.get_words)
app.command(name="add", help="Add words to a domain")(words.add_words)
app.command(name="check", help="Run one reload check against a domain")(words.check)
app.command(name="watch", help="Poll a domain for changes")(words.watch)
app.command(name="status", help="Show registered remote dictionaries")(status.status)
app.command(name="init-db", help="Create the relational word tables")(status.init_db)


if __name__ == "__main__":
    app()
