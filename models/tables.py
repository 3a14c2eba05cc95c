"""Table layout of the term store.

Tables are plain SQLAlchemy Core `Table` objects built per `TableNames`, so
stores with different prefixes can share one database and one process.

Layout (names before prefixing):

- `text(id, text)`: unique raw strings
- `text_in_language(id, language, text_id)`: unique (language, text) pairs
- `term_in_language(id, type_id, text_in_language_id)`: unique (kind, localized text)
- `<kind>_terms(id, <kind>_id, term_in_language_id)`: entity -> term links
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    UniqueConstraint,
)

from models.entity_kinds import DEFAULT_ENTITY_KINDS, ITEM, PROPERTY, EntityKind

TEXT = "text"
TEXT_IN_LANGUAGE = "text_in_language"
TERM_IN_LANGUAGE = "term_in_language"

# Lengths follow the byte limits of the original deployment.
TEXT_MAX_LENGTH = 255
LANGUAGE_MAX_LENGTH = 10

_PREFIX_RE = re.compile(r"[A-Za-z0-9_]*")

# Big id type that still autoincrements on SQLite.
_BigId = BigInteger().with_variant(Integer(), "sqlite")


@dataclass(frozen=True)
class TableNames:
    """Table and index names of one term store install.

    The prefix may only contain ASCII letters, digits and underscores.
    """

    prefix_value: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.prefix_value, str) or not _PREFIX_RE.fullmatch(
            self.prefix_value
        ):
            raise ValueError(
                f"Table name prefix must be alphanumeric (or '_'), got {self.prefix_value!r}"
            )

    def prefix(self, name: str) -> str:
        return self.prefix_value + name

    def text(self) -> str:
        return self.prefix(TEXT)

    def text_in_language(self) -> str:
        return self.prefix(TEXT_IN_LANGUAGE)

    def term_in_language(self) -> str:
        return self.prefix(TERM_IN_LANGUAGE)

    def entity_terms(self, kind: EntityKind) -> str:
        return self.prefix(kind.terms_table)

    def item_terms(self) -> str:
        return self.entity_terms(ITEM)

    def property_terms(self) -> str:
        return self.entity_terms(PROPERTY)


@dataclass(frozen=True)
class TermTables:
    """Bound set of tables for one `TableNames`."""

    names: TableNames
    metadata: MetaData
    text: Table
    text_in_language: Table
    term_in_language: Table
    entity_terms: dict[str, Table]

    def for_kind(self, kind: EntityKind) -> Table:
        try:
            return self.entity_terms[kind.name]
        except KeyError:
            raise ValueError(f"No terms table configured for entity kind {kind.name!r}") from None

    def all_tables(self) -> list[Table]:
        """Tables in dependency order (referenced tables first)."""
        return [
            self.text,
            self.text_in_language,
            self.term_in_language,
            *self.entity_terms.values(),
        ]


def _entity_terms_table(
    metadata: MetaData, names: TableNames, kind: EntityKind
) -> Table:
    table_name = names.entity_terms(kind)
    return Table(
        table_name,
        metadata,
        Column("id", _BigId, primary_key=True, autoincrement=True),
        Column(kind.id_column, Integer, nullable=False),
        Column(
            "term_in_language_id",
            Integer,
            ForeignKey(f"{names.term_in_language()}.id"),
            nullable=False,
        ),
        # No uniqueness on (entity, term): the write path guarantees one link.
        Index(f"{table_name}_{kind.id_column}", kind.id_column),
        Index(f"{table_name}_term_in_language_id", "term_in_language_id"),
    )


def build_term_tables(
    names: TableNames | None = None,
    entity_kinds: Iterable[EntityKind] = DEFAULT_ENTITY_KINDS,
) -> TermTables:
    """Create the table definitions for `names` on a fresh MetaData."""

    names = names or TableNames()
    metadata = MetaData()

    text = Table(
        names.text(),
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("text", String(TEXT_MAX_LENGTH), nullable=False),
        UniqueConstraint("text", name=names.prefix("uq_text_text")),
    )

    text_in_language = Table(
        names.text_in_language(),
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("language", String(LANGUAGE_MAX_LENGTH), nullable=False),
        Column("text_id", Integer, ForeignKey(f"{names.text()}.id"), nullable=False),
        UniqueConstraint(
            "language", "text_id", name=names.prefix("uq_text_in_language_language_text")
        ),
        Index(names.prefix("ix_text_in_language_text_id"), "text_id"),
    )

    term_in_language = Table(
        names.term_in_language(),
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("type_id", SmallInteger, nullable=False),
        Column(
            "text_in_language_id",
            Integer,
            ForeignKey(f"{names.text_in_language()}.id"),
            nullable=False,
        ),
        UniqueConstraint(
            "type_id",
            "text_in_language_id",
            name=names.prefix("uq_term_in_language_type_text_in_language"),
        ),
        Index(
            names.prefix("ix_term_in_language_text_in_language_id"),
            "text_in_language_id",
        ),
    )

    entity_terms = {
        kind.name: _entity_terms_table(metadata, names, kind) for kind in entity_kinds
    }

    return TermTables(
        names=names,
        metadata=metadata,
        text=text,
        text_in_language=text_in_language,
        term_in_language=term_in_language,
        entity_terms=entity_terms,
    )
