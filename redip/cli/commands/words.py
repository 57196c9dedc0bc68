"""Word list commands: fetch, add, reload check and watch."""

import asyncio
import logging

import typer

from redip.cli.utils import console, fail, run_async, word_table
from redip.config import settings
from redip.constants import DictionaryType
from redip.dictionary import SourceRef, build_remote_dictionary
from redip.exceptions import RedipError

logger = logging.getLogger(__name__)

TYPE_HELP = "Dictionary type: main or stop"
URI_HELP = "Source reference as scheme://domain, e.g. redis://user"


class ConsoleDictionary:
    """Reload target that reports reloads on the console instead of rebuilding a tokenizer."""

    def __init__(self) -> None:
        self.reloads: list[DictionaryType] = []

    def reload(self, dictionary_type: DictionaryType) -> None:
        self.reloads.append(dictionary_type)
        console.print(f"[success]Reload triggered for {dictionary_type}[/]")


def _parse_type(value: str) -> DictionaryType:
    try:
        return DictionaryType.from_name(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None


def _parse_ref(uri: str) -> SourceRef:
    try:
        return SourceRef.parse(uri)
    except ValueError as e:
        fail(e)


def get_words(
    uri: str = typer.Argument(..., help=URI_HELP),
    dict_type: str = typer.Option("main", "--type", "-t", help=TYPE_HELP),
) -> None:
    """Print the word list of a domain."""
    run_async(_get_words(uri, _parse_type(dict_type)))


async def _get_words(uri: str, dictionary_type: DictionaryType) -> set[str]:
    """Async implementation of words command."""
    ref = _parse_ref(uri)
    async with build_remote_dictionary(settings) as registry:
        words = await registry.get_remote_words(dictionary_type, ref)

    if not words:
        console.print(f"[warning]No {dictionary_type} found for '{ref}'[/]")
        return words

    console.print(word_table(f"{dictionary_type} @ {ref}", words))
    console.print(f"[dim]{len(words)} words[/]")
    return words


def add_words(
    uri: str = typer.Argument(..., help=URI_HELP),
    words: list[str] = typer.Argument(..., help="Words to add"),
    dict_type: str = typer.Option("main", "--type", "-t", help=TYPE_HELP),
) -> None:
    """Add words to a domain and mark it for reload."""
    run_async(_add_words(uri, _parse_type(dict_type), words))


async def _add_words(uri: str, dictionary_type: DictionaryType, words: list[str]) -> None:
    """Async implementation of add command."""
    ref = _parse_ref(uri)
    async with build_remote_dictionary(settings) as registry:
        try:
            ok = await registry.add_word_to(dictionary_type, ref, *words)
        except (RedipError, ValueError) as e:
            fail(e)

    if not ok:
        fail(f"Failed to add words to '{ref}'")

    console.print(f"[success]Added {len(words)} words to {dictionary_type} @ {ref}[/]")


def check(
    uri: str = typer.Argument(..., help=URI_HELP),
    dict_type: str = typer.Option("main", "--type", "-t", help=TYPE_HELP),
) -> None:
    """Run one reload check against a domain."""
    run_async(_check(uri, _parse_type(dict_type)))


async def _check(uri: str, dictionary_type: DictionaryType) -> bool:
    """Async implementation of check command."""
    ref = _parse_ref(uri)
    dictionary = ConsoleDictionary()
    async with build_remote_dictionary(settings) as registry:
        try:
            reloaded = await registry.reload_remote_dictionary(dictionary, dictionary_type, ref)
        except RedipError as e:
            fail(e)

    if not reloaded:
        console.print(f"[dim]No changes for {dictionary_type} @ {ref}[/]")
    return reloaded


def watch(
    uri: str = typer.Argument(..., help=URI_HELP),
    dict_type: str = typer.Option("main", "--type", "-t", help=TYPE_HELP),
    period: int | None = typer.Option(
        None, "--period", "-p", help="Seconds between checks (default: refresh.period)"
    ),
    count: int | None = typer.Option(None, "--count", "-n", help="Stop after this many checks"),
) -> None:
    """Poll a domain for changes until interrupted."""
    run_async(_watch(uri, _parse_type(dict_type), period, count), interrupted="Stopped")


async def _watch(
    uri: str,
    dictionary_type: DictionaryType,
    period: int | None,
    count: int | None,
    delay: int | None = None,
) -> int:
    """Async implementation of watch command. Returns the number of reloads."""
    ref = _parse_ref(uri)
    period = settings.refresh.period if period is None else period
    delay = settings.refresh.delay if delay is None else delay
    dictionary = ConsoleDictionary()

    console.print(f"[info]Watching {dictionary_type} @ {ref} every {period}s[/]")
    async with build_remote_dictionary(settings) as registry:
        await asyncio.sleep(delay)
        checks = 0
        while True:
            try:
                await registry.reload_remote_dictionary(dictionary, dictionary_type, ref)
            except RedipError as e:
                fail(e)
            checks += 1
            logger.debug(f"Reload check {checks} for '{ref}' done")
            if count is not None and checks >= count:
                break
            await asyncio.sleep(period)

    return len(dictionary.reloads)
