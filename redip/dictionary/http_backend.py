"""HTTP remote dictionary: a read-only word list served as plain text.

Words live at ``{base}/es-dict/{dict_name}/{domain}``, one per line. Change
detection uses conditional HEAD requests against the last ``Last-Modified``
and ``ETag`` values seen for each location.
"""

import logging
import threading
from dataclasses import dataclass

import httpx

from redip.config import HttpSettings, settings
from redip.constants import DictionaryType, Etymology
from redip.dictionary.base import RemoteDictionarySource
from redip.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FreshnessMarker:
    """Validators last returned by the server for one location."""

    last_modified: str | None = None
    etag: str | None = None


class FreshnessMarkers:
    """Thread-safe map of location -> FreshnessMarker."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._markers: dict[str, FreshnessMarker] = {}

    def get(self, location: str) -> FreshnessMarker | None:
        with self._lock:
            return self._markers.get(location)

    def put(self, location: str, marker: FreshnessMarker) -> None:
        with self._lock:
            self._markers[location] = marker

    def clear(self) -> None:
        with self._lock:
            self._markers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._markers)


def _changed(current: str | None, cached: str | None) -> bool:
    """A returned validator counts as changed if it is new or differs from the cached one."""
    if current is None:
        return False
    return cached is None or current.lower() != cached.lower()


class HttpRemoteDictionary(RemoteDictionarySource):
    """Remote dictionary served over HTTP."""

    def __init__(
        self,
        http: HttpSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the HTTP source.

        Args:
            http: Server settings. Defaults to the global settings
            transport: Optional httpx transport, used by tests
        """
        http = http or settings.http
        if not http.base or not http.base.strip():
            raise ConfigurationError("http.base is required for the HTTP remote dictionary")

        self.base = http.base.strip().rstrip("/")
        self.markers = FreshnessMarkers()
        timeout = httpx.Timeout(
            http.read_timeout,
            connect=http.connect_timeout,
            pool=http.connect_timeout,
        )
        self._client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
            transport=transport,
        )

    @property
    def etymology(self) -> str:
        return Etymology.HTTP.value

    def location(self, dictionary_type: DictionaryType, domain: str) -> str:
        """URL of a domain's word list."""
        return f"{self.base}/es-dict/{dictionary_type.dict_name}/{domain}"

    async def get_remote_words(self, dictionary_type: DictionaryType, domain: str) -> set[str]:
        location = self.location(dictionary_type, domain)
        logger.info(
            f"'http' remote dictionary get words "
            f"from domain '{domain}' dictionary '{dictionary_type}'"
        )

        try:
            response = await self._client.get(location)
        except httpx.HTTPError as e:
            logger.error(f"getRemoteWords error '{e}' location '{location}'")
            return set()

        if response.status_code != httpx.codes.OK:
            logger.warning(f"remote dictionary '{location}' returned status {response.status_code}")
            return set()

        charset = response.charset_encoding or "utf-8"
        try:
            text = response.content.decode(charset)
        except (LookupError, UnicodeDecodeError) as e:
            logger.error(f"Could not decode '{location}' as {charset}: {e}")
            return set()

        words = {line for line in text.splitlines() if line}
        logger.info(f"[Remote DictFile Loading] append {len(words)} words from '{location}'")
        return words

    async def consume_freshness(self, dictionary_type: DictionaryType, domain: str) -> bool:
        """HEAD the word list with the cached validators; True if the server reports a change."""
        location = self.location(dictionary_type, domain)
        marker = self.markers.get(location) or FreshnessMarker()

        headers = {}
        if marker.last_modified is not None:
            headers["If-Modified-Since"] = marker.last_modified
        if marker.etag is not None:
            headers["If-None-Match"] = marker.etag

        try:
            response = await self._client.head(location, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"remote_ext_dict error '{e}' location '{location}'")
            return False

        if response.status_code == httpx.codes.NOT_MODIFIED:
            logger.info("[Remote DictFile Reloading] Not modified!")
            return False

        if response.status_code != httpx.codes.OK:
            logger.info(f"remote_ext_dict '{location}' return bad code '{response.status_code}'")
            return False

        last_modified = response.headers.get("Last-Modified")
        etag = response.headers.get("ETag")
        if not (_changed(last_modified, marker.last_modified) or _changed(etag, marker.etag)):
            return False

        self.markers.put(location, FreshnessMarker(last_modified=last_modified, etag=etag))
        logger.info(f"remote dictionary '{location}' changed, reload required")
        return True

    async def _add_words(
        self, dictionary_type: DictionaryType, domain: str, words: list[str]
    ) -> bool:
        logger.info(f"'{self.etymology}' remote dictionary add new word not supported")
        return False

    async def close(self) -> None:
        if self._client.is_closed:
            return
        logger.info(f"'{self.etymology}' remote dictionary is closing...")
        await self._client.aclose()
        logger.info(f"'{self.etymology}' remote dictionary is closed")
