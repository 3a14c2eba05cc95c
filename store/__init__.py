"""Normalized, deduplicating store for entity labels, descriptions and aliases."""

from store.entity_term_store import EntityTermStore
from store.exceptions import StoreError, TermStoreError
from store.normalized_store import NormalizedStore
from store.schema import SchemaCreator
from store.term_store import TermStore

__all__ = [
    "EntityTermStore",
    "NormalizedStore",
    "SchemaCreator",
    "StoreError",
    "TermStore",
    "TermStoreError",
]
