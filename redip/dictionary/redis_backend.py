"""Redis remote dictionary.

Keys:
    words: ``{prefix}:{domain}:{dict_name}`` (sorted set, scored by insertion time)
    state: ``{prefix}:{domain}:{dict_name}:state`` (string, DomainDictState label)
"""

import logging
import time

import redis.asyncio as aioredis
from redis.asyncio.cluster import ClusterNode, RedisCluster
from redis.exceptions import RedisError

from redip.config import RedisSettings, settings
from redip.constants import DictionaryType, Etymology
from redip.dictionary.base import DomainDictState, RemoteDictionarySource
from redip.helpers import filter_blank

logger = logging.getLogger(__name__)


def cluster_startup_nodes(nodes: list[str]) -> list[ClusterNode]:
    """Parse ``host:port`` entries, skipping blank or malformed ones."""
    startup_nodes = []
    for node in filter_blank(nodes):
        host, sep, port = node.rpartition(":")
        if not sep or not host or not port.isdigit():
            logger.warning(f"Ignoring malformed redis cluster node '{node}'")
            continue
        startup_nodes.append(ClusterNode(host, int(port)))
    return startup_nodes


def create_client(cfg: RedisSettings) -> aioredis.Redis | RedisCluster:
    """Build a cluster client when cluster nodes are configured, else a single-node client."""
    startup_nodes = cluster_startup_nodes(cfg.cluster_nodes)
    if startup_nodes:
        logger.info(f"Connecting to redis cluster via {len(startup_nodes)} startup nodes")
        return RedisCluster(
            startup_nodes=startup_nodes,
            username=cfg.username,
            password=cfg.password,
            ssl=cfg.ssl,
            decode_responses=True,
        )
    return aioredis.Redis(
        host=cfg.host,
        port=cfg.port,
        db=cfg.database,
        username=cfg.username,
        password=cfg.password,
        ssl=cfg.ssl,
        decode_responses=True,
    )


class RedisRemoteDictionary(RemoteDictionarySource):
    """Word lists stored in Redis sorted sets."""

    def __init__(
        self,
        redis_settings: RedisSettings | None = None,
        client: aioredis.Redis | RedisCluster | None = None,
    ) -> None:
        """
        Initialize the Redis source.

        Args:
            redis_settings: Connection settings, used when no client is given
            client: An existing client (must decode responses); the source takes ownership of it
        """
        cfg = redis_settings or settings.redis
        self.key_prefix = cfg.key_prefix
        self._client = client if client is not None else create_client(cfg)
        self._closed = False

    @property
    def etymology(self) -> str:
        return Etymology.REDIS.value

    @property
    def clustered(self) -> bool:
        return isinstance(self._client, RedisCluster)

    def key(self, dictionary_type: DictionaryType, domain: str) -> str:
        return f"{self.key_prefix}:{domain}:{dictionary_type.dict_name}"

    @staticmethod
    def state_key(key: str) -> str:
        return f"{key}:state"

    async def get_remote_words(self, dictionary_type: DictionaryType, domain: str) -> set[str]:
        logger.info(
            f"'redis' remote dictionary get words from domain '{domain}' "
            f"dictionary '{dictionary_type}'"
        )
        try:
            words = await self._client.zrange(self.key(dictionary_type, domain), 0, -1)
            await self._consume_state(dictionary_type, domain)
        except RedisError as e:
            logger.error(f"'redis' remote dictionary get words failed: {e}")
            return set()
        return set(words)

    async def consume_freshness(self, dictionary_type: DictionaryType, domain: str) -> bool:
        try:
            return await self._consume_state(dictionary_type, domain)
        except RedisError as e:
            logger.error(f"'redis' remote dictionary state check failed: {e}")
            return False

    async def _consume_state(self, dictionary_type: DictionaryType, domain: str) -> bool:
        state_key = self.state_key(self.key(dictionary_type, domain))
        current = await self._client.get(state_key)
        logger.info(
            f"'redis' remote dictionary state '{state_key}' = '{current}' for domain '{domain}'."
        )
        if DomainDictState.from_label(current) is not DomainDictState.NEWLY:
            return False
        await self._client.set(state_key, DomainDictState.NON_NEWLY.value)
        return True

    def _pipeline(self):
        # The words key and its state key hash to different cluster slots,
        # so a cluster pipeline cannot wrap them in MULTI
        if self.clustered:
            return self._client.pipeline()
        return self._client.pipeline(transaction=True)

    async def _add_words(
        self, dictionary_type: DictionaryType, domain: str, words: list[str]
    ) -> bool:
        logger.info(
            f"'redis' remote dictionary add new words {words} for dictionary '{dictionary_type}'"
        )
        key = self.key(dictionary_type, domain)
        now_ms = time.time() * 1000
        scores = {word: now_ms + offset for offset, word in enumerate(words)}

        try:
            async with self._pipeline() as pipe:
                results = await (
                    pipe.zadd(key, scores)
                    .set(self.state_key(key), DomainDictState.NEWLY.value)
                    .execute()
                )
        except RedisError as e:
            logger.error(f"'{self.etymology}' add new words {words} failure '{e}'.")
            return False

        ok = bool(results) and bool(results[-1])
        if ok:
            logger.info(f"'{self.etymology}' add new words {words} success.")
        return ok

    async def close(self) -> None:
        if self._closed:
            return
        logger.info(f"'{self.etymology}' remote dictionary is closing...")
        await self._client.aclose()
        self._closed = True
        logger.info(f"'{self.etymology}' remote dictionary is closed")
