"""Logging setup for the redip CLI and for applications embedding the registry."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from redip.config import Settings
from redip.config import settings as default_settings

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"

# Client libraries that log every request or statement at INFO
CHATTY_LOGGERS = ("httpx", "httpcore", "aiosqlite", "sqlalchemy.engine")

_HANDLER_MARKER = "_redip_handler"


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """
    Attach redip's console handler, and a rotating file handler if enabled.

    Safe to call repeatedly: handlers installed by an earlier call are
    replaced, while handlers owned by the host application are left alone.

    Returns:
        The root logger
    """
    settings = settings or default_settings
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    for handler in root_logger.handlers[:]:
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(_tag(console_handler))

    if settings.log_file_enabled:
        log_path = settings.resolved_log_file_path
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(_tag(file_handler))

    if settings.log_level != "DEBUG":
        for name in CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
