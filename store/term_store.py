from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.engine import Engine

from config import Config
from db import make_engine, make_session_factory
from logging_utils import configure_app_logging, get_logger
from models.entity_kinds import DEFAULT_ENTITY_KINDS, ITEM, PROPERTY, EntityKind
from models.tables import TableNames, TermTables, build_term_tables
from store.entity_term_store import EntityTermStore
from store.normalized_store import NormalizedStore
from store.schema import Reporter, SchemaCreator

logger = get_logger(__name__)


class TermStore:
    """Entry point of one term store install.

    Owns the engine, the (optionally prefixed) table names and the schema
    lifecycle, and hands out one `EntityTermStore` per entity kind.

    Example:

        store = TermStore(make_engine("sqlite:///terms.db"), table_prefix="wiki_")
        store.install()
        items = store.new_item_term_store()
        items.store_terms(42, Fingerprint(labels={"en": "Hello"}))
    """

    def __init__(
        self,
        engine: Engine,
        table_prefix: str = "",
        entity_kinds: Iterable[EntityKind] = DEFAULT_ENTITY_KINDS,
    ):
        self._engine = engine
        self._tables = build_term_tables(TableNames(table_prefix), entity_kinds)
        self._session_factory = make_session_factory(engine)
        self._normalized = NormalizedStore(self._tables)

    @classmethod
    def from_config(cls, config: Config | None = None) -> TermStore:
        """Build a store (and its engine) from `Config` / the environment."""

        config = config or Config()
        configure_app_logging(config.LOG_LEVEL)

        engine = make_engine(
            config.DATABASE_URL, busy_timeout_ms=config.SQLITE_BUSY_TIMEOUT_MS
        )
        store = cls(engine, table_prefix=config.TABLE_PREFIX)

        if config.AUTO_INSTALL:
            logger.info("TERM_STORE_AUTO_INSTALL=1; installing term store schema")
            store.install()
        return store

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def tables(self) -> TermTables:
        return self._tables

    @property
    def table_names(self) -> TableNames:
        return self._tables.names

    def _schema(self, reporter: Reporter | None) -> SchemaCreator:
        return SchemaCreator(self._engine, self._tables, reporter)

    def create_schema(self, reporter: Reporter | None = None) -> None:
        self._schema(reporter).create_schema()

    def install(self, reporter: Reporter | None = None) -> bool:
        """Create missing tables; safe to call on an installed store."""
        return self._schema(reporter).install()

    def uninstall(self, reporter: Reporter | None = None) -> bool:
        """CAUTION! This drops all tables of this store (its prefix only)."""
        return self._schema(reporter).uninstall()

    def new_entity_term_store(self, kind: EntityKind) -> EntityTermStore:
        return EntityTermStore(
            self._session_factory, self._tables, kind, self._normalized
        )

    def new_item_term_store(self) -> EntityTermStore:
        return self.new_entity_term_store(ITEM)

    def new_property_term_store(self) -> EntityTermStore:
        return self.new_entity_term_store(PROPERTY)
