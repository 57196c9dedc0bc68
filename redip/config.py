"""Configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from redip.helpers import filter_blank

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class HttpSettings(BaseModel):
    """Remote dictionary HTTP server."""

    base: str = "http://localhost"
    connect_timeout: float = 10.0
    read_timeout: float = 15.0


class SqlSettings(BaseModel):
    """Relational word store. The backend is only built when ``url`` is set."""

    url: str | None = None  # e.g. mysql+aiomysql://host:3306/dict
    username: str | None = None
    password: str | None = None
    echo: bool = False


class RedisSettings(BaseModel):
    """Key-value word store."""

    enabled: bool = True
    host: str = "localhost"
    port: int = 6379
    username: str | None = None
    password: str | None = None
    database: int = 0
    ssl: bool = False
    key_prefix: str = "es-ik-words"
    # "host:port" entries; when any is valid a Redis Cluster is used instead of host/port
    cluster_nodes: list[str] = Field(default_factory=list)


class RefreshSettings(BaseModel):
    """Polling schedule for callers that watch remote dictionaries (seconds)."""

    delay: int = 10
    period: int = 60


class LocalDictSettings(BaseModel):
    """Local extension dictionary files."""

    main: list[str] = Field(default_factory=list)
    stop: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Settings, configurable via environment variables or .env file.

    Nested sections use a double underscore, e.g. ``REDIP_SQL__URL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Path("data")

    # Logging
    log_level: LogLevel = "INFO"
    log_file_enabled: bool = False
    log_file_path: Path | None = None
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_file_backup_count: int = 5

    @property
    def resolved_log_file_path(self) -> Path:
        """Return log file path, defaulting to data_dir/redip.log if not set."""
        return self.log_file_path or self.data_dir / "redip.log"

    # Remote sources
    http: HttpSettings = Field(default_factory=HttpSettings)
    sql: SqlSettings = Field(default_factory=SqlSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    refresh: RefreshSettings = Field(default_factory=RefreshSettings)

    # Local dictionaries
    local: LocalDictSettings = Field(default_factory=LocalDictSettings)

    @property
    def local_main_dict_files(self) -> set[str]:
        return set(filter_blank(self.local.main))

    @property
    def local_stop_dict_files(self) -> set[str]:
        return set(filter_blank(self.local.stop))


settings = Settings()
