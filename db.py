"""Engine and session construction.

There is no module-level engine: every `TermStore` is built around an engine
its caller owns, so several stores (e.g. different table prefixes or
databases) can live in one process.
"""

from __future__ import annotations

import os
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_SQLITE_BUSY_TIMEOUT_MS = 5000


def _sqlite_connect_listener(busy_timeout_ms: int):
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        """Configure SQLite for concurrent read/write and savepoints."""
        # Hand transaction control to SQLAlchemy; pysqlite's implicit BEGIN
        # breaks SAVEPOINT handling.
        dbapi_connection.isolation_level = None

        cursor = dbapi_connection.cursor()
        try:
            # Wait for locks instead of failing immediately.
            cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
            cursor.execute("PRAGMA foreign_keys=ON")
            # Better concurrency (readers not blocked by writers).
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
        except sqlite3.DatabaseError as e:
            # Not fatal (e.g. read-only files); continue with defaults.
            logger.warning(f"Could not apply SQLite PRAGMAs: {e}")
        finally:
            cursor.close()

    return _set_sqlite_pragmas


def _ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    db_path = make_url(database_url).database
    if not db_path or db_path == ":memory:" or db_path.startswith("file:"):
        return
    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _begin_sqlite_transaction(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def make_engine(
    database_url: str,
    *,
    busy_timeout_ms: int = DEFAULT_SQLITE_BUSY_TIMEOUT_MS,
    echo: bool = False,
) -> Engine:
    """Create an engine for the term store.

    SQLite URLs get safer defaults for concurrent writers and explicit
    transaction handling, which the acquire-or-insert savepoints rely on.
    Other backends are created as-is.
    """

    if make_url(database_url).get_backend_name() == "sqlite":
        _ensure_sqlite_dir(database_url)

        # `check_same_thread=False` because the pool may hand a connection
        # to a different thread than the one that opened it.
        engine = create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": max(busy_timeout_ms / 1000.0, 1.0),
            },
            pool_pre_ping=True,
            echo=echo,
        )
        event.listen(engine, "connect", _sqlite_connect_listener(busy_timeout_ms))
        event.listen(engine, "begin", _begin_sqlite_transaction)
        return engine

    return create_engine(database_url, pool_pre_ping=True, echo=echo)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
