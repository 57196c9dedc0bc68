"""CLI utility modules."""

from redip.cli.utils.async_runner import run_async
from redip.cli.utils.console import console, error_console, fail, word_table

__all__ = ["run_async", "console", "error_console", "fail", "word_table"]
