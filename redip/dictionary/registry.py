"""Registry routing dictionary requests to remote sources by etymology."""

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from types import TracebackType

from redip.config import Settings
from redip.config import settings as default_settings
from redip.constants import DictionaryType, Etymology
from redip.dictionary.base import Reloadable, RemoteDictionarySource, SourceRef
from redip.dictionary.http_backend import HttpRemoteDictionary
from redip.dictionary.redis_backend import RedisRemoteDictionary
from redip.dictionary.sql_backend import SqlRemoteDictionary
from redip.exceptions import ConfigurationError, NotInitializedError, UnknownEtymologyError
from redip.helpers import filter_blank

logger = logging.getLogger(__name__)


SourceFactory = Callable[[], RemoteDictionarySource]


def _builtin_factories(settings: Settings) -> list[tuple[str, SourceFactory]]:
    factories: list[tuple[str, SourceFactory]] = [
        (Etymology.HTTP.value, lambda: HttpRemoteDictionary(settings.http)),
    ]
    if settings.redis.enabled:
        factories.append((Etymology.REDIS.value, lambda: RedisRemoteDictionary(settings.redis)))
    if settings.sql.url:
        factories.append((Etymology.MYSQL.value, lambda: SqlRemoteDictionary(settings.sql)))
    return factories


def _as_ref(ref: SourceRef | str) -> SourceRef:
    return ref if isinstance(ref, SourceRef) else SourceRef.parse(ref)


class RemoteDictionary:
    """
    Routes dictionary requests to the source registered for a URI scheme.

    Create one per application, call ``initialize()`` once, and pass it to
    every caller. Fetches, reload checks and additions all run under a single
    lock, so at most one of them is in flight across every source, even
    when several threads each drive the registry from their own event loop.
    """

    def __init__(self) -> None:
        self._sources: dict[str, RemoteDictionarySource] = {}
        self._initialized = False
        self._init_lock = threading.Lock()
        # Shared by every thread and event loop that drives this registry
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def etymologies(self) -> list[str]:
        return list(self._sources)

    def initialize(self, settings: Settings | None = None) -> None:
        """
        Mark the registry ready. Later calls are no-ops.

        Args:
            settings: If given, build and register the built-in sources that
                are configured (http, redis when enabled, mysql when sql.url is set)
        """
        with self._init_lock:
            if self._initialized:
                logger.debug("Remote Dictionary already initialized")
                return
            self._initialized = True

            if settings is not None:
                for etymology, factory in _builtin_factories(settings):
                    try:
                        self.add_remote_dictionary(factory())
                    except ConfigurationError as e:
                        logger.warning(f"Skipping '{etymology}' remote dictionary: {e}")

        logger.info("Remote Dictionary initialized")

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        """Hold the registry lock without blocking the running event loop."""
        if not self._lock.acquire(blocking=False):
            acquiring = asyncio.ensure_future(asyncio.to_thread(self._lock.acquire))
            try:
                await asyncio.shield(acquiring)
            except asyncio.CancelledError:
                # The worker thread still takes the lock; hand it straight back
                acquiring.add_done_callback(lambda _: self._lock.release())
                raise
        try:
            yield
        finally:
            self._lock.release()

    def _check_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError()

    def add_remote_dictionary(self, source: RemoteDictionarySource) -> None:
        """Register a source under its etymology. The first registration wins."""
        self._check_initialized()
        etymology = Etymology.of(source.etymology)
        if etymology in self._sources:
            logger.warning(f"The Remote Dictionary for etymology '{etymology}' is already loaded")
            return
        self._sources[etymology] = source
        logger.info(f"The Remote Dictionary for etymology '{etymology}' is loaded!")

    def get_source(self, etymology: str | Etymology) -> RemoteDictionarySource | None:
        self._check_initialized()
        source = self._sources.get(Etymology.of(etymology))
        if source is None:
            logger.info(f"the remote dictionary for '{etymology}' not found.")
        return source

    def _require_source(self, etymology: str | Etymology) -> RemoteDictionarySource:
        source = self.get_source(etymology)
        if source is None:
            raise UnknownEtymologyError(Etymology.of(etymology))
        return source

    async def get_remote_words(
        self,
        dictionary_type: DictionaryType,
        ref: SourceRef | str,
    ) -> set[str]:
        """
        Fetch a domain's words from the source its scheme selects.

        Returns:
            Non-blank, stripped words; empty if no source matches or the fetch failed
        """
        self._check_initialized()
        ref = _as_ref(ref)
        logger.info(f"begin to get remote dictionary words from '{ref}'...")
        source = self.get_source(ref.scheme)
        if source is None:
            return set()

        async with self._exclusive():
            try:
                words = await source.get_remote_words_for(dictionary_type, ref)
            except Exception as e:
                logger.warning(f"Error getting words from '{ref}': {e}")
                return set()
        return set(filter_blank(words))

    async def get_domain_words(
        self,
        etymology: str | Etymology,
        dictionary_type: DictionaryType,
        domain: str,
    ) -> set[str]:
        return await self.get_remote_words(dictionary_type, SourceRef.of(etymology, domain))

    async def reload_remote_dictionary(
        self,
        dictionary: Reloadable,
        dictionary_type: DictionaryType,
        ref: SourceRef | str,
    ) -> bool:
        """
        Ask the source whether the domain changed and reload the tokenizer if so.

        Returns:
            True if ``dictionary.reload`` was called

        Raises:
            UnknownEtymologyError: If no source is registered for the scheme
        """
        self._check_initialized()
        ref = _as_ref(ref)
        source = self._require_source(ref.scheme)
        async with self._exclusive():
            return await source.reload_dictionary(dictionary, dictionary_type, ref.authority)

    async def add_word(
        self,
        etymology: str | Etymology,
        dictionary_type: DictionaryType,
        domain: str,
        *words: str,
    ) -> bool:
        """
        Add words to a domain through the named source.

        Raises:
            UnknownEtymologyError: If no source is registered for the etymology
            ValueError: If no words are given
        """
        self._check_initialized()
        source = self._require_source(etymology)
        async with self._exclusive():
            return await source.add_word(dictionary_type, domain, *words)

    async def add_word_to(
        self,
        dictionary_type: DictionaryType,
        ref: SourceRef | str,
        *words: str,
    ) -> bool:
        ref = _as_ref(ref)
        return await self.add_word(ref.scheme, dictionary_type, ref.authority, *words)

    async def close(self) -> None:
        """Close all source connections."""
        for etymology, source in self._sources.items():
            try:
                await source.close()
            except Exception as e:
                logger.warning(f"Error closing '{etymology}' remote dictionary: {e}")

    async def __aenter__(self) -> "RemoteDictionary":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def build_remote_dictionary(settings: Settings | None = None) -> RemoteDictionary:
    """Create an initialized registry with the configured built-in sources."""
    registry = RemoteDictionary()
    registry.initialize(settings or default_settings)
    return registry
