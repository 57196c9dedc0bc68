"""Relational remote dictionary backed by the ``words`` and ``dict_state`` tables."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from redip.config import SqlSettings, settings
from redip.constants import DictionaryType, Etymology
from redip.database import create_engine, create_session_factory, init_db
from redip.dictionary.base import DomainDictState, RemoteDictionarySource
from redip.models import DictState, Word

logger = logging.getLogger(__name__)


class SqlRemoteDictionary(RemoteDictionarySource):
    """
    Word lists stored in a SQL database.

    Adding words and marking the domain as newly changed happen in one
    transaction. Reading a word list acknowledges pending changes, just like
    a reload check does.
    """

    def __init__(self, sql: SqlSettings | None = None, engine: AsyncEngine | None = None) -> None:
        """
        Initialize the relational source.

        Args:
            sql: Connection settings, used when no engine is given
            engine: An existing async engine; the source takes ownership of it
        """
        self._engine = engine if engine is not None else create_engine(sql or settings.sql)
        self._session_factory = create_session_factory(self._engine)
        self._closed = False

    @property
    def etymology(self) -> str:
        return Etymology.MYSQL.value

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def init_schema(self) -> None:
        """Create the ``words`` and ``dict_state`` tables if missing."""
        await init_db(self._engine)

    async def get_remote_words(self, dictionary_type: DictionaryType, domain: str) -> set[str]:
        logger.info(
            f"'mysql' remote dictionary get words "
            f"from domain '{domain}' dictionary '{dictionary_type}'"
        )
        try:
            async with self._session_factory() as session, session.begin():
                stmt = select(Word.word).where(
                    Word.domain == domain,
                    Word.word_type == dictionary_type.code,
                )
                result = await session.execute(stmt)
                words = set(result.scalars().all())
                await self._consume_state(session, domain)
        except SQLAlchemyError as e:
            logger.error(f"[Remote DictFile Loading] error => {e}")
            return set()

        logger.info(f"[Remote DictFile Loading] append {len(words)} words.")
        return words

    async def consume_freshness(self, dictionary_type: DictionaryType, domain: str) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                return await self._consume_state(session, domain)
        except SQLAlchemyError as e:
            logger.error(f"[Remote DictFile Reloading] error => {e}")
            return False

    async def _add_words(
        self, dictionary_type: DictionaryType, domain: str, words: list[str]
    ) -> bool:
        logger.info(
            f"'{self.etymology}' remote dictionary add {len(words)} new words "
            f"for domain '{domain}' dictionary '{dictionary_type}'"
        )
        try:
            async with self._session_factory() as session, session.begin():
                session.add_all(
                    [
                        Word(word=word, word_type=dictionary_type.code, domain=domain)
                        for word in words
                    ]
                )
                await session.flush()
                await self._mark_newly(session, domain)
        except SQLAlchemyError as e:
            logger.error(f"'{self.etymology}' add new words {words} failure '{e}'.")
            return False
        return True

    async def _read_state(self, session: AsyncSession, domain: str) -> DictState | None:
        stmt = select(DictState).where(DictState.domain == domain).limit(1).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _consume_state(self, session: AsyncSession, domain: str) -> bool:
        """Flip NEWLY to NON_NEWLY; True if it was NEWLY."""
        row = await self._read_state(session, domain)
        if row is None:
            logger.info(f"Cannot find the `dict_state` for domain '{domain}'")
            return False

        state = DomainDictState.from_label(row.state)
        logger.info(f"[Remote DictFile] state '{state.value}' for domain '{domain}'")
        if state is not DomainDictState.NEWLY:
            return False

        row.state = DomainDictState.NON_NEWLY.value
        await session.flush()
        return True

    async def _mark_newly(self, session: AsyncSession, domain: str) -> None:
        row = await self._read_state(session, domain)
        if row is None:
            session.add(DictState(domain=domain, state=DomainDictState.NEWLY.value))
        elif DomainDictState.from_label(row.state) is not DomainDictState.NEWLY:
            row.state = DomainDictState.NEWLY.value
        await session.flush()

    async def close(self) -> None:
        if self._closed:
            return
        logger.info(f"'{self.etymology}' remote dictionary is closing...")
        await self._engine.dispose()
        self._closed = True
        logger.info(f"'{self.etymology}' remote dictionary is closed")
