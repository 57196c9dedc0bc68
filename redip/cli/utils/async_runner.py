"""Bridge from synchronous typer commands to the async registry."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer

from redip.cli.utils.console import console

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T], interrupted: str | None = None) -> T | None:
    """
    Run a command coroutine on a fresh event loop.

    Args:
        coro: The ``_impl`` coroutine of a command
        interrupted: Message printed on Ctrl-C; if None the interrupt propagates
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        if interrupted is None:
            raise
        console.print(f"\n[dim]{interrupted}[/]")
        raise typer.Exit(130) from None
