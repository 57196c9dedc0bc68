"""Base classes and value types shared by every remote dictionary source."""

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

from redip.constants import DictionaryType, Etymology

logger = logging.getLogger(__name__)


class DomainDictState(Enum):
    """Whether a domain has words the tokenizer has not picked up yet."""

    NEWLY = "newly"  # new words pending, reload due
    NON_NEWLY = "non-newly"
    NOT_FOUND = "not-found"  # no state record yet

    @classmethod
    def from_label(cls, label: str | None) -> "DomainDictState":
        """Map a stored label to a state; unknown or missing labels are NOT_FOUND."""
        for state in cls:
            if state.value == label:
                return state
        return cls.NOT_FOUND


@dataclass(frozen=True)
class SourceRef:
    """A ``scheme://authority`` reference: scheme picks the source, authority is the domain."""

    scheme: str
    authority: str

    @classmethod
    def parse(cls, uri: str) -> "SourceRef":
        parts = urlsplit(uri.strip())
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"the location {uri!r} is illegal: expected 'scheme://domain'")
        return cls(scheme=parts.scheme.lower(), authority=parts.netloc)

    @classmethod
    def of(cls, etymology: "str | Etymology", domain: str) -> "SourceRef":
        return cls(scheme=Etymology.of(etymology), authority=domain)

    @property
    def domain(self) -> str:
        return self.authority

    def __str__(self) -> str:
        return f"{self.scheme}://{self.authority}"


@runtime_checkable
class Reloadable(Protocol):
    """The tokenizer side: reloads one of its dictionaries when told to."""

    def reload(self, dictionary_type: DictionaryType) -> Any:
        ...  # pragma: no cover


class RemoteDictionarySource(ABC):
    """Abstract base class for remote dictionary sources."""

    @property
    @abstractmethod
    def etymology(self) -> str:
        """Return the identifier used as registry key and URI scheme."""
        ...  # pragma: no cover

    @abstractmethod
    async def get_remote_words(self, dictionary_type: DictionaryType, domain: str) -> set[str]:
        """
        Fetch the current word list of a domain.

        Args:
            dictionary_type: Main or stop words
            domain: The domain owning the list

        Returns:
            The words, or an empty set when there is no data or the store failed
        """
        ...  # pragma: no cover

    async def get_remote_words_for(
        self, dictionary_type: DictionaryType, ref: SourceRef
    ) -> set[str]:
        """Fetch words addressed by a ``scheme://domain`` reference."""
        return await self.get_remote_words(dictionary_type, ref.authority)

    @abstractmethod
    async def consume_freshness(self, dictionary_type: DictionaryType, domain: str) -> bool:
        """
        Check the source's freshness record and acknowledge it.

        Returns:
            True exactly once per batch of changes the tokenizer has not seen
        """
        ...  # pragma: no cover

    async def reload_dictionary(
        self,
        dictionary: Reloadable,
        dictionary_type: DictionaryType,
        domain: str,
    ) -> bool:
        """Call ``dictionary.reload`` if the domain changed since the last check.

        Returns True when the reload callback was invoked.
        """
        logger.info(
            f"'{self.etymology}' remote dictionary reload check "
            f"for domain '{domain}' dictionary '{dictionary_type}'"
        )
        if not await self.consume_freshness(dictionary_type, domain):
            return False
        result = dictionary.reload(dictionary_type)
        if inspect.isawaitable(result):
            await result
        return True

    async def add_word(self, dictionary_type: DictionaryType, domain: str, *words: str) -> bool:
        """Append words to a domain's list and mark it as newly changed.

        Raises:
            ValueError: If no words are given
        """
        if not words:
            raise ValueError("the words is 'None' or empty.")
        return await self._add_words(dictionary_type, domain, list(words))

    async def add_main_words(self, domain: str, *words: str) -> bool:
        return await self.add_word(DictionaryType.MAIN_WORDS, domain, *words)

    async def add_stop_words(self, domain: str, *words: str) -> bool:
        return await self.add_word(DictionaryType.STOP_WORDS, domain, *words)

    @abstractmethod
    async def _add_words(
        self, dictionary_type: DictionaryType, domain: str, words: list[str]
    ) -> bool:
        """Persist words; return False if the store could not take them."""
        ...  # pragma: no cover

    @abstractmethod
    async def close(self) -> None:
        """Release connections. Safe to call more than once."""
        ...  # pragma: no cover
