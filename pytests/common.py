"""Shared helpers for tests.

Intended usage:
- spin up a temporary SQLite database
- install the term store tables (optionally prefixed)
- inspect raw table contents

These utilities keep tests small and consistent.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Table, func, inspect, select
from sqlalchemy.engine import Engine

from db import make_engine
from store.term_store import TermStore

__all__ = [
    "make_sqlite_engine",
    "create_installed_term_store",
    "table_row_count",
    "table_rows",
    "table_names",
]


def make_sqlite_engine(db_path: Path | str) -> Engine:
    """Create a SQLite engine suitable for tests."""

    if isinstance(db_path, Path):
        db_path = str(db_path)
    return make_engine(f"sqlite:///{db_path}", busy_timeout_ms=1000)


def create_installed_term_store(
    db_path: Path, prefix: str = ""
) -> tuple[TermStore, Engine]:
    """Create an empty SQLite DB file and install the term store in it.

    Returns (store, engine).
    """

    engine = make_sqlite_engine(db_path)
    store = TermStore(engine, table_prefix=prefix)
    store.install()
    return store, engine


def table_row_count(engine: Engine, table: Table) -> int:
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()


def table_rows(engine: Engine, table: Table, *columns: str) -> list[tuple]:
    """Return the given columns of every row, ordered by id."""

    with engine.connect() as conn:
        stmt = select(*(table.c[c] for c in columns)).order_by(table.c.id)
        return [tuple(r) for r in conn.execute(stmt).all()]


def table_names(engine: Engine) -> set[str]:
    return set(inspect(engine).get_table_names())
