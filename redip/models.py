"""SQLAlchemy ORM models for the relational word store."""

from datetime import datetime, timezone

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from redip.database import Base


def _utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


class Word(Base):
    """A word in a domain's main or stop word list."""

    __tablename__ = "words"
    __table_args__ = (Index("ix_words_domain_type", "domain", "word_type"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    word: Mapped[str] = mapped_column(Text)
    word_type: Mapped[int] = mapped_column(Integer)  # DictionaryType.code
    domain: Mapped[str] = mapped_column(String(128))
    create_time: Mapped[datetime] = mapped_column(default=_utc_now)

    def __repr__(self) -> str:
        return f"<Word {self.domain}/{self.word_type}: {self.word!r}>"


class DictState(Base):
    """Freshness state of a domain: newly, non-newly (not-found when absent)."""

    __tablename__ = "dict_state"

    id: Mapped[int] = mapped_column(primary_key=True)
    domain: Mapped[str] = mapped_column(String(128), unique=True)
    state: Mapped[str] = mapped_column(String(16))
    update_time: Mapped[datetime] = mapped_column(default=_utc_now, onupdate=_utc_now)
