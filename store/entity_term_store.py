"""Read/write/delete of one entity kind's terms."""

from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from logging_utils import get_logger
from models.entity_kinds import EntityKind
from models.fingerprint import Fingerprint
from models.tables import TermTables
from store.exceptions import StoreError
from store.normalized_store import NormalizedStore

logger = get_logger(__name__)


class EntityTermStore:
    """Terms of all entities of one kind (items, properties, ...).

    Each entity's terms are rows of the kind's association table pointing at
    shared `term_in_language` rows. Writes replace the whole set.

    Every public method runs in its own session; `store_terms` and
    `delete_terms` commit atomically or not at all. Database failures are
    raised as `StoreError`; invalid ids raise `ValueError` before any I/O.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        tables: TermTables,
        kind: EntityKind,
        normalized_store: NormalizedStore | None = None,
    ):
        self._session_factory = session_factory
        self._tables = tables
        self._kind = kind
        self._terms = tables.for_kind(kind)
        self._entity_id_col = self._terms.c[kind.id_column]
        self._normalized = normalized_store or NormalizedStore(tables)

    @property
    def kind(self) -> EntityKind:
        return self._kind

    def store_terms(self, entity_id: int | str, fingerprint: Fingerprint) -> None:
        """Replace all terms of `entity_id` with those in `fingerprint`."""

        numeric_id = self._kind.numeric_id(entity_id)
        if not isinstance(fingerprint, Fingerprint):
            raise TypeError(f"Expected a Fingerprint, got {type(fingerprint).__name__}")

        try:
            with self._session_factory.begin() as session:
                removed = self._delete_links(session, numeric_id)
                added = self._insert_links(session, numeric_id, fingerprint)
        except SQLAlchemyError as e:
            raise self._failure("store", numeric_id, e) from e

        logger.debug(
            f"Stored terms for {self._kind.name} {numeric_id}: removed={removed} added={added}"
        )

    def delete_terms(self, entity_id: int | str) -> None:
        """Remove all terms of `entity_id`. The shared text rows stay."""

        numeric_id = self._kind.numeric_id(entity_id)
        try:
            with self._session_factory.begin() as session:
                removed = self._delete_links(session, numeric_id)
        except SQLAlchemyError as e:
            raise self._failure("delete", numeric_id, e) from e

        logger.debug(f"Deleted {removed} term links of {self._kind.name} {numeric_id}")

    def get_terms(self, entity_id: int | str) -> Fingerprint:
        """Return the terms of `entity_id`; empty Fingerprint if it has none."""

        numeric_id = self._kind.numeric_id(entity_id)
        try:
            with self._session_factory() as session:
                rows = session.execute(self._select_terms(numeric_id)).all()
        except SQLAlchemyError as e:
            raise self._failure("get", numeric_id, e) from e

        return self._normalized.assemble_fingerprint(rows)

    def _delete_links(self, session: Session, numeric_id: int) -> int:
        result = session.execute(
            delete(self._terms).where(self._entity_id_col == numeric_id)
        )
        return result.rowcount or 0

    def _insert_links(
        self, session: Session, numeric_id: int, fingerprint: Fingerprint
    ) -> int:
        # One link per term, aliases included one by one.
        links = [
            {
                self._kind.id_column: numeric_id,
                "term_in_language_id": self._normalized.acquire_term_in_language_id(
                    session, term
                ),
            }
            for term in fingerprint.iter_terms()
        ]
        if links:
            session.execute(insert(self._terms), links)
        return len(links)

    def _select_terms(self, numeric_id: int):
        links = self._terms
        term_in_lang = self._tables.term_in_language
        text_in_lang = self._tables.text_in_language
        texts = self._tables.text

        return (
            select(
                texts.c.text.label("text"),
                text_in_lang.c.language.label("language"),
                term_in_lang.c.type_id.label("type_id"),
            )
            .select_from(
                links.join(term_in_lang, links.c.term_in_language_id == term_in_lang.c.id)
                .join(text_in_lang, term_in_lang.c.text_in_language_id == text_in_lang.c.id)
                .join(texts, text_in_lang.c.text_id == texts.c.id)
            )
            .where(self._entity_id_col == numeric_id)
            # Link ids grow with insertion, so aliases come back in stored order.
            .order_by(links.c.id)
        )

    def _failure(self, action: str, numeric_id: int, e: SQLAlchemyError) -> StoreError:
        logger.error(
            f"Failed to {action} terms of {self._kind.name} {numeric_id}: {e}",
            exc_info=True,
        )
        return StoreError.from_exception(
            e, f"Failed to {action} terms of {self._kind.name} {numeric_id}"
        )
