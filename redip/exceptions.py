"""Exceptions raised by the remote dictionary registry and backends."""


class RedipError(Exception):
    """Base class for all redip errors."""


class NotInitializedError(RedipError, RuntimeError):
    """The registry was used before ``initialize()``."""

    def __init__(self) -> None:
        super().__init__("The RemoteDictionary is not initialized.")


class UnknownEtymologyError(RedipError, LookupError):
    """No remote dictionary source is registered for the requested etymology."""

    def __init__(self, etymology: str) -> None:
        self.etymology = etymology
        super().__init__(f"No remote dictionary registered for etymology '{etymology}'")


class ConfigurationError(RedipError, ValueError):
    """A backend was constructed without a required configuration field."""
