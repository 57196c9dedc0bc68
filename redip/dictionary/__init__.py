"""Remote dictionary sources and the registry that routes to them."""

from redip.dictionary.base import DomainDictState, Reloadable, RemoteDictionarySource, SourceRef
from redip.dictionary.http_backend import HttpRemoteDictionary
from redip.dictionary.redis_backend import RedisRemoteDictionary
from redip.dictionary.registry import RemoteDictionary, build_remote_dictionary
from redip.dictionary.sql_backend import SqlRemoteDictionary

__all__ = [
    "DomainDictState",
    "Reloadable",
    "RemoteDictionarySource",
    "SourceRef",
    "HttpRemoteDictionary",
    "RedisRemoteDictionary",
    "SqlRemoteDictionary",
    "RemoteDictionary",
    "build_remote_dictionary",
]
