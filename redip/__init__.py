"""Remote dictionaries for tokenizers.

HTTP, SQL and Redis word lists that reload without a restart.
"""

from redip.constants import DictionaryType, Etymology
from redip.dictionary import (
    DomainDictState,
    Reloadable,
    RemoteDictionary,
    RemoteDictionarySource,
    SourceRef,
    build_remote_dictionary,
)

__version__ = "0.1.0"

__all__ = [
    "DictionaryType",
    "Etymology",
    "DomainDictState",
    "Reloadable",
    "RemoteDictionary",
    "RemoteDictionarySource",
    "SourceRef",
    "build_remote_dictionary",
]
