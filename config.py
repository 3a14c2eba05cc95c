from __future__ import annotations

import os
from dataclasses import dataclass, field

from settings import SETTINGS


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {v!r}") from None


def _env_str(name: str) -> str:
    return os.getenv(name, str(SETTINGS[name]))


def log_level() -> str:
    """`LOG_LEVEL` from the environment or settings, upper-cased."""
    return _env_str("LOG_LEVEL").upper()


@dataclass(frozen=True)
class Config:
    """Term store configuration loaded from environment variables.

    Every field falls back to `settings.SETTINGS` when the variable is unset.
    Values are read when the instance is created, so tests can monkeypatch the
    environment and build a fresh `Config()`.
    """

    DATABASE_URL: str = field(
        default_factory=lambda: _env_str("TERM_STORE_DATABASE_URL")
    )
    TABLE_PREFIX: str = field(
        default_factory=lambda: _env_str("TERM_STORE_TABLE_PREFIX")
    )
    AUTO_INSTALL: bool = field(
        default_factory=lambda: _env_bool(
            "TERM_STORE_AUTO_INSTALL", bool(SETTINGS["TERM_STORE_AUTO_INSTALL"])
        )
    )
    SQLITE_BUSY_TIMEOUT_MS: int = field(
        default_factory=lambda: _env_int(
            "SQLITE_BUSY_TIMEOUT_MS", int(SETTINGS["SQLITE_BUSY_TIMEOUT_MS"])
        )
    )

    # Logging
    LOG_LEVEL: str = field(default_factory=log_level)
