"""Logging for the term store.

Every module logs through `get_logger(__name__)`, a child of the shared
`term_store` logger. Records go to the console, to `app.log` and to a
per-module file under `LOG_DIR`, rotated at UTC midnight.
"""

from __future__ import annotations

import logging
import os
import time
from logging.handlers import TimedRotatingFileHandler

from config import log_level
from settings import SETTINGS


class _UTCFormatter(logging.Formatter):
    """Formatter that forces UTC timestamps."""

    converter = staticmethod(time.gmtime)


_APP_LOGGER_NAME = "term_store"

_FORMAT = "%(asctime)sZ %(levelname)s pid=%(process)d %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def _logs_dir() -> str:
    return os.getenv("LOG_DIR") or str(SETTINGS["LOG_DIR"])


def _sanitize_filename(name: str) -> str:
    # Convert e.g. "store.entity_term_store" -> "store_entity_term_store"
    name = (name or "app").strip() or "app"
    return "".join(ch if (ch.isalnum() or ch in {"-", "_"}) else "_" for ch in name)


def _file_handler(file_name: str, level: int) -> TimedRotatingFileHandler:
    fh = TimedRotatingFileHandler(
        os.path.join(_logs_dir(), file_name),
        when="midnight",
        interval=1,
        backupCount=14,
        utc=True,
        encoding="utf-8",
        delay=True,
    )
    fh.setLevel(level)
    fh.setFormatter(_UTCFormatter(fmt=_FORMAT, datefmt=_DATEFMT))
    return fh


def configure_app_logging(level_name: str = "INFO") -> logging.Logger:
    """Configure and return the root application logger.

    Safe to call multiple times; later calls only adjust the level.
    """

    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    app_logger = logging.getLogger(_APP_LOGGER_NAME)
    app_logger.setLevel(level)

    # Avoid duplicate handlers.
    if getattr(app_logger, "_configured", False):
        return app_logger

    os.makedirs(_logs_dir(), exist_ok=True)

    # Console handler
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(_UTCFormatter(fmt=_FORMAT, datefmt=_DATEFMT))

    app_logger.addHandler(sh)
    app_logger.addHandler(_file_handler("app.log", level))

    # Do not propagate to the global root logger (prevents double logging).
    app_logger.propagate = False

    app_logger._configured = True  # type: ignore[attr-defined]
    return app_logger


def get_logger(module_name: str | None = None) -> logging.Logger:
    """Get a module-specific logger that also writes to its own log file.

    Example:
        logger = get_logger(__name__)
    """

    base = configure_app_logging(log_level())

    child_name = module_name or "app"
    logger = logging.getLogger(f"{_APP_LOGGER_NAME}.{child_name}")

    # Per-module file handler (only once). Records still reach the console
    # through the parent app logger.
    if not getattr(logger, "_file_configured", False):
        logger.setLevel(base.level)
        logger.addHandler(
            _file_handler(_sanitize_filename(child_name) + ".log", base.level)
        )
        logger._file_configured = True  # type: ignore[attr-defined]

    return logger
