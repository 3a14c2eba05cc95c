"""Normalization of terms into the shared text tables, and back.

A term ("en", "Hello", LABEL) is resolved bottom up:

    text("Hello") -> text_in_language("en", text_id) -> term_in_language(LABEL, text_in_language_id)

Every level is shared by all entities whose content matches, so each row is
created at most once (see `store.pools.UniquePool`). Rows are never deleted
here; unreferenced rows simply stay in the pools.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy.orm import Session

from logging_utils import get_logger
from models.fingerprint import Fingerprint, Term, TermType
from models.tables import TermTables
from store.pools import UniquePool

logger = get_logger(__name__)


class NormalizedStore:
    def __init__(self, tables: TermTables):
        self.tables = tables
        self.texts = UniquePool(tables.text, ("text",))
        self.texts_in_language = UniquePool(
            tables.text_in_language, ("language", "text_id")
        )
        self.terms_in_language = UniquePool(
            tables.term_in_language, ("type_id", "text_in_language_id")
        )

    def acquire_text_id(self, session: Session, text: str) -> int:
        return self.texts.acquire(session, text=text)

    def acquire_text_in_language_id(
        self, session: Session, language: str, text_id: int
    ) -> int:
        return self.texts_in_language.acquire(
            session, language=language, text_id=text_id
        )

    def acquire_term_in_language_id(self, session: Session, term: Term) -> int:
        """Return the id of the `term_in_language` row for `term`, creating
        any missing rows along the chain."""

        text_id = self.acquire_text_id(session, term.text)
        text_in_language_id = self.acquire_text_in_language_id(
            session, term.language, text_id
        )
        return self.terms_in_language.acquire(
            session,
            type_id=int(term.type),
            text_in_language_id=text_in_language_id,
        )

    @staticmethod
    def assemble_fingerprint(rows: Iterable[Any]) -> Fingerprint:
        """Regroup flat (text, language, type_id) rows into a Fingerprint.

        Labels and descriptions keep the last row per language. Aliases keep
        row order per language; callers order rows by link id so aliases come
        back in the order they were stored.
        """

        labels: dict[str, str] = {}
        descriptions: dict[str, str] = {}
        alias_groups: dict[str, list[str]] = {}

        for row in rows:
            try:
                term_type = TermType(row.type_id)
            except ValueError:
                logger.warning(
                    f"Skipping term row with unknown type_id={row.type_id!r} ({row.language}: {row.text!r})"
                )
                continue

            if term_type is TermType.LABEL:
                labels[row.language] = row.text
            elif term_type is TermType.DESCRIPTION:
                descriptions[row.language] = row.text
            else:
                alias_groups.setdefault(row.language, []).append(row.text)

        return Fingerprint(
            labels=labels, descriptions=descriptions, alias_groups=alias_groups
        )
