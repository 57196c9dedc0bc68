"""Tests for CLI command implementations."""

from unittest.mock import AsyncMock, patch

import pytest
import typer

from redip.cli.commands import status as status_commands
from redip.cli.commands.words import (
    ConsoleDictionary,
    _add_words,
    _check,
    _get_words,
    _parse_type,
    _watch,
)
from redip.cli.utils import fail, run_async, word_table
from redip.constants import DictionaryType


@pytest.fixture
def cli_registry(registry, redis_source):
    """Registry served to the commands instead of the configured one."""
    registry.add_remote_dictionary(redis_source)
    # Commands close the registry on exit; keep the source usable across calls
    with (
        patch("redip.cli.commands.words.build_remote_dictionary", return_value=registry),
        patch("redip.cli.commands.status.build_remote_dictionary", return_value=registry),
        patch.object(registry, "close", AsyncMock()),
    ):
        yield registry


class TestParseType:
    """Tests for --type parsing."""

    def test_valid(self):
        assert _parse_type("stop") is DictionaryType.STOP_WORDS

    def test_invalid(self):
        with pytest.raises(typer.BadParameter):
            _parse_type("nope")


class TestWordsCommands:
    """Tests for words, add and check."""

    @pytest.mark.asyncio
    async def test_add_then_list(self, cli_registry):
        await _add_words("redis://user", DictionaryType.MAIN_WORDS, ["w1", "w2"])
        words = await _get_words("redis://user", DictionaryType.MAIN_WORDS)
        assert words == {"w1", "w2"}

    @pytest.mark.asyncio
    async def test_list_unknown_scheme_is_empty(self, cli_registry):
        assert await _get_words("ftp://user", DictionaryType.MAIN_WORDS) == set()

    @pytest.mark.asyncio
    async def test_add_unknown_scheme_exits(self, cli_registry):
        with pytest.raises(typer.Exit):
            await _add_words("ftp://user", DictionaryType.MAIN_WORDS, ["w1"])

    @pytest.mark.asyncio
    async def test_add_failure_exits(self, cli_registry, redis_source):
        with patch.object(redis_source, "_add_words", AsyncMock(return_value=False)):
            with pytest.raises(typer.Exit):
                await _add_words("redis://user", DictionaryType.MAIN_WORDS, ["w1"])

    @pytest.mark.asyncio
    async def test_invalid_uri_exits(self, cli_registry):
        with pytest.raises(typer.Exit):
            await _get_words("user", DictionaryType.MAIN_WORDS)

    @pytest.mark.asyncio
    async def test_check_reports_reload_once(self, cli_registry):
        await _add_words("redis://user", DictionaryType.MAIN_WORDS, ["w1"])
        assert await _check("redis://user", DictionaryType.MAIN_WORDS) is True
        assert await _check("redis://user", DictionaryType.MAIN_WORDS) is False

    @pytest.mark.asyncio
    async def test_check_unknown_scheme_exits(self, cli_registry):
        with pytest.raises(typer.Exit):
            await _check("ftp://user", DictionaryType.MAIN_WORDS)


class TestWatchCommand:
    """Tests for the polling watch command."""

    @pytest.mark.asyncio
    async def test_watch_counts_reloads(self, cli_registry):
        await _add_words("redis://user", DictionaryType.MAIN_WORDS, ["w1"])
        reloads = await _watch(
            "redis://user", DictionaryType.MAIN_WORDS, period=0, count=3, delay=0
        )
        assert reloads == 1


class TestConsoleDictionary:
    def test_records_reloads(self):
        dictionary = ConsoleDictionary()
        dictionary.reload(DictionaryType.STOP_WORDS)
        assert dictionary.reloads == [DictionaryType.STOP_WORDS]


class TestStatusCommands:
    """Tests for status and init-db."""

    @pytest.mark.asyncio
    async def test_status_runs(self, cli_registry):
        await status_commands._status()

    @pytest.mark.asyncio
    async def test_init_db_without_url_exits(self):
        with patch("redip.cli.commands.status.settings") as mock_settings:
            mock_settings.sql.url = None
            mock_settings.sql.username = None
            mock_settings.sql.password = None
            with pytest.raises(typer.Exit):
                await status_commands._init_db()

    @pytest.mark.asyncio
    async def test_init_db_creates_tables(self, tmp_path):
        from redip.config import SqlSettings

        with patch("redip.cli.commands.status.settings") as mock_settings:
            mock_settings.sql = SqlSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
            await status_commands._init_db()

        assert (tmp_path / "cli.db").exists()


class TestCliUtils:
    def test_run_async_returns_result(self):
        async def answer():
            return 42

        assert run_async(answer()) == 42

    def test_run_async_interrupt_exits(self):
        async def interrupted():
            raise KeyboardInterrupt

        with pytest.raises(typer.Exit) as exc_info:
            run_async(interrupted(), interrupted="Stopped")
        assert exc_info.value.exit_code == 130

    def test_fail_exits_with_code(self):
        with pytest.raises(typer.Exit) as exc_info:
            fail("boom", code=2)
        assert exc_info.value.exit_code == 2

    def test_word_table_sorted(self):
        table = word_table("t", {"b", "a"})
        assert table.row_count == 2
