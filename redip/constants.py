"""Dictionary types and built-in source etymologies."""

from enum import Enum


class DictionaryType(Enum):
    """Which word list an operation addresses."""

    MAIN_WORDS = (1, "main-words")
    STOP_WORDS = (2, "stop-words")

    def __init__(self, code: int, dict_name: str) -> None:
        self.code = code  # stored in words.word_type
        self.dict_name = dict_name  # used in URLs and keys

    @classmethod
    def from_name(cls, name: str) -> "DictionaryType":
        """Parse ``main``/``stop``, a dict name or a member name."""
        normalized = name.strip().lower().replace("_", "-")
        for member in cls:
            if normalized in (member.dict_name, member.dict_name.split("-")[0]):
                return member
        raise ValueError(f"Unknown dictionary type: {name!r}")

    def __str__(self) -> str:
        return self.dict_name


class Etymology(str, Enum):
    """Identifiers of the built-in remote dictionary sources."""

    HTTP = "http"
    MYSQL = "mysql"
    REDIS = "redis"

    @classmethod
    def of(cls, value: "str | Etymology") -> str:
        """Return the plain routing key for an enum member or raw string."""
        if isinstance(value, Etymology):
            return value.value
        return value.strip().lower()
