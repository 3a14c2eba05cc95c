"""Value types and table definitions of the term store.

Tables are built per install (see `models.tables.build_term_tables`) rather
than registered on a shared declarative Base, so table-name prefixes stay a
construction-time setting.
"""

from models.entity_kinds import DEFAULT_ENTITY_KINDS, ITEM, PROPERTY, EntityKind
from models.fingerprint import Fingerprint, Term, TermType
from models.tables import TableNames, TermTables, build_term_tables

__all__ = [
    "DEFAULT_ENTITY_KINDS",
    "ITEM",
    "PROPERTY",
    "EntityKind",
    "Fingerprint",
    "Term",
    "TermType",
    "TableNames",
    "TermTables",
    "build_term_tables",
]
