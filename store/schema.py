"""Schema lifecycle: create, idempotent install, uninstall.

Only the tables of one `TermTables` (one prefix) are touched, so several
installs can share a database.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from logging_utils import get_logger
from models.tables import TermTables
from store.exceptions import StoreError

logger = get_logger(__name__)

Reporter = Callable[[str], None]


class SchemaCreator:
    def __init__(
        self,
        engine: Engine,
        tables: TermTables,
        reporter: Reporter | None = None,
    ):
        self._engine = engine
        self._tables = tables
        self._reporter = reporter

    def _report(self, message: str) -> None:
        logger.info(message)
        if self._reporter is not None:
            self._reporter(message)

    def existing_tables(self) -> list[str]:
        """Names of this install's tables that exist in the database."""
        try:
            inspector = inspect(self._engine)
            return [
                t.name for t in self._tables.all_tables() if inspector.has_table(t.name)
            ]
        except SQLAlchemyError as e:
            raise StoreError.from_exception(e, "Could not inspect schema") from e

    def create_schema(self) -> None:
        """Create all tables. Fails if any of them already exists."""

        self._report(f"Creating term store tables (prefix={self._tables.names.prefix_value!r})")
        try:
            self._tables.metadata.create_all(self._engine, checkfirst=False)
        except SQLAlchemyError as e:
            logger.error(f"Schema creation failed: {e}", exc_info=True)
            raise StoreError.from_exception(e, "Schema creation failed") from e

    def install(self) -> bool:
        """Create missing tables.

        Returns:
            True if any table was created, False if all already existed.
        """

        existing = set(self.existing_tables())
        missing = [t for t in self._tables.all_tables() if t.name not in existing]
        if not missing:
            self._report("Term store already installed; nothing to do")
            return False

        self._report(
            "Installing term store: creating tables "
            + ", ".join(t.name for t in missing)
        )
        try:
            self._tables.metadata.create_all(
                self._engine, tables=missing, checkfirst=True
            )
        except SQLAlchemyError as e:
            logger.error(f"Term store install failed: {e}", exc_info=True)
            raise StoreError.from_exception(e, "Term store install failed") from e

        self._report("Term store installed")
        return True

    def uninstall(self) -> bool:
        """Drop this install's tables. CAUTION: removes all term data.

        Returns:
            True if any table was dropped, False if none existed.
        """

        existing = self.existing_tables()
        if not existing:
            self._report("Term store not installed; nothing to remove")
            return False

        self._report("Uninstalling term store: removing tables " + ", ".join(existing))
        try:
            self._tables.metadata.drop_all(self._engine, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error(f"Term store uninstall failed: {e}", exc_info=True)
            raise StoreError.from_exception(e, "Term store uninstall failed") from e

        self._report("Term store uninstalled")
        return True
