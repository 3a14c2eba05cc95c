from __future__ import annotations

from typing import Any

from sqlalchemy import Table, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from logging_utils import get_logger
from store.exceptions import StoreError

logger = get_logger(__name__)


class UniquePool:
    """Acquire-or-insert access to a table whose rows are deduplicated by a
    unique key and never modified once written.

    `acquire()` looks the key up and inserts when it is absent. The insert
    runs inside a SAVEPOINT: if a concurrent writer inserted the same key
    first, the uniqueness constraint rejects ours, the savepoint is rolled
    back and the key is looked up once more. A second miss means the
    conflict was something else and is raised as StoreError.

    Callers own the transaction; nothing here commits.
    """

    def __init__(self, table: Table, key_columns: tuple[str, ...]):
        self.table = table
        self.key_columns = key_columns

    def find(self, session: Session, values: dict[str, Any]) -> int | None:
        stmt = (
            select(self.table.c.id)
            .where(*(self.table.c[col] == values[col] for col in self.key_columns))
            .limit(1)
        )
        return session.execute(stmt).scalar()

    def acquire(self, session: Session, **values: Any) -> int:
        existing = self.find(session, values)
        if existing is not None:
            return existing

        try:
            with session.begin_nested():
                result = session.execute(insert(self.table).values(**values))
        except IntegrityError as e:
            conflict = e
            logger.warning(
                f"Insert into {self.table.name} conflicted ({e.orig}); re-reading {values!r}"
            )
        else:
            new_id = result.inserted_primary_key[0]
            logger.debug(f"Inserted {self.table.name} id={new_id} {values!r}")
            return new_id

        existing = self.find(session, values)
        if existing is None:
            logger.error(
                f"Unresolved conflict acquiring {self.table.name} row for {values!r}: {conflict.orig}"
            )
            raise StoreError.from_exception(
                conflict, f"Could not acquire {self.table.name} row"
            ) from conflict
        return existing
