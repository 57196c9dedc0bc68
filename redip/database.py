"""Database configuration and engine construction for the relational word store."""

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from redip.config import SqlSettings
from redip.exceptions import ConfigurationError


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def build_url(sql: SqlSettings) -> URL:
    """Merge the configured credentials into the connection URL."""
    if not sql.url or not sql.url.strip():
        raise ConfigurationError("sql.url is required for the relational remote dictionary")
    url = make_url(sql.url.strip())
    if sql.username is not None:
        url = url.set(username=sql.username)
    if sql.password is not None:
        url = url.set(password=sql.password)
    return url


def create_engine(sql: SqlSettings) -> AsyncEngine:
    """Create the async engine owned by one relational backend."""
    return create_async_engine(build_url(sql), echo=sql.echo, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables."""
    # Import models so they register with Base.metadata
    from redip import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
