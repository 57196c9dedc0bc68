"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import httpx
import pytest
from fakeredis import FakeAsyncRedis, FakeServer
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from redip.config import HttpSettings
from redip.constants import DictionaryType
from redip.database import init_db
from redip.dictionary.http_backend import HttpRemoteDictionary
from redip.dictionary.redis_backend import RedisRemoteDictionary
from redip.dictionary.registry import RemoteDictionary
from redip.dictionary.sql_backend import SqlRemoteDictionary

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingDictionary:
    """Tokenizer stand-in that records reload calls."""

    def __init__(self) -> None:
        self.reloads: list[DictionaryType] = []

    def reload(self, dictionary_type: DictionaryType) -> None:
        self.reloads.append(dictionary_type)


@pytest.fixture
def dictionary() -> RecordingDictionary:
    return RecordingDictionary()


@pytest.fixture
async def async_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'redip.db'}",
        echo=False,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def sql_source(async_engine: AsyncEngine) -> AsyncGenerator[SqlRemoteDictionary, None]:
    source = SqlRemoteDictionary(engine=async_engine)
    yield source
    await source.close()


@pytest.fixture
async def redis_client() -> AsyncGenerator[FakeAsyncRedis, None]:
    """An isolated in-memory Redis."""
    client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def redis_source(
    redis_client: FakeAsyncRedis,
) -> AsyncGenerator[RedisRemoteDictionary, None]:
    source = RedisRemoteDictionary(client=redis_client)
    yield source
    await source.close()


@pytest.fixture
def http_settings() -> HttpSettings:
    return HttpSettings(base="http://dict.test/")


@pytest.fixture
async def make_http_source(
    http_settings: HttpSettings,
) -> AsyncGenerator[Callable[[Handler], HttpRemoteDictionary], None]:
    """Build HTTP sources whose requests are answered by a handler function."""
    created: list[HttpRemoteDictionary] = []

    def _make(handler: Handler) -> HttpRemoteDictionary:
        source = HttpRemoteDictionary(http_settings, transport=httpx.MockTransport(handler))
        created.append(source)
        return source

    yield _make

    for source in created:
        await source.close()


@pytest.fixture
def registry() -> RemoteDictionary:
    """An initialized registry without built-in sources."""
    remote_dictionary = RemoteDictionary()
    remote_dictionary.initialize()
    return remote_dictionary
