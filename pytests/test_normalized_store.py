from __future__ import annotations

from types import SimpleNamespace

import pytest

from db import make_session_factory
from models.fingerprint import Fingerprint, Term, TermType
from models.tables import TableNames, build_term_tables
from pytests.common import make_sqlite_engine, table_row_count
from store.exceptions import StoreError
from store.normalized_store import NormalizedStore


@pytest.fixture()
def normalized(tmp_path):
    """NormalizedStore on freshly created tables, plus its session factory."""

    engine = make_sqlite_engine(tmp_path / "normalized.sqlite")
    tables = build_term_tables(TableNames("n_"))
    tables.metadata.create_all(engine)
    try:
        yield NormalizedStore(tables), make_session_factory(engine), engine
    finally:
        engine.dispose()


def _row(text: str, language: str, type_id: int) -> SimpleNamespace:
    return SimpleNamespace(text=text, language=language, type_id=type_id)


def test_acquire_returns_same_id_for_same_term(normalized):
    store, Session, engine = normalized
    term = Term("en", "Hello", TermType.LABEL)

    with Session.begin() as session:
        first = store.acquire_term_in_language_id(session, term)
    with Session.begin() as session:
        second = store.acquire_term_in_language_id(session, term)

    assert first == second
    assert table_row_count(engine, store.tables.text) == 1
    assert table_row_count(engine, store.tables.text_in_language) == 1
    assert table_row_count(engine, store.tables.term_in_language) == 1


def test_acquire_distinguishes_kind_and_language(normalized):
    store, Session, _engine = normalized

    with Session.begin() as session:
        ids = {
            store.acquire_term_in_language_id(session, Term("en", "Hello", TermType.LABEL)),
            store.acquire_term_in_language_id(session, Term("en", "Hello", TermType.ALIAS)),
            store.acquire_term_in_language_id(session, Term("de", "Hello", TermType.LABEL)),
        }
        text_ids = {
            store.acquire_text_id(session, "Hello"),
            store.acquire_text_id(session, "Hello"),
        }

    assert len(ids) == 3
    assert len(text_ids) == 1


def test_text_lookup_is_exact(normalized):
    store, Session, _engine = normalized

    with Session.begin() as session:
        assert store.acquire_text_id(session, "hello") != store.acquire_text_id(
            session, "Hello"
        )


def test_acquire_recovers_when_concurrent_writer_inserted_first(normalized, monkeypatch):
    store, Session, engine = normalized
    pool = store.texts

    with Session.begin() as session:
        existing_id = store.acquire_text_id(session, "Hello")

    # Simulate a writer that committed between our lookup and our insert:
    # the first lookup misses, the insert then violates the unique constraint.
    real_find = pool.find
    lookups = []

    def racing_find(session, values):
        lookups.append(values)
        if len(lookups) == 1:
            return None
        return real_find(session, values)

    monkeypatch.setattr(pool, "find", racing_find)

    with Session.begin() as session:
        assert store.acquire_text_id(session, "Hello") == existing_id
        # The transaction is still usable after the rolled back savepoint.
        assert store.acquire_text_id(session, "World") != existing_id

    assert lookups[:2] == [{"text": "Hello"}, {"text": "Hello"}]
    assert table_row_count(engine, store.tables.text) == 2


def test_acquire_gives_up_after_one_retry(normalized, monkeypatch):
    store, Session, _engine = normalized
    pool = store.texts

    with Session.begin() as session:
        store.acquire_text_id(session, "Hello")

    calls = []

    def never_finds(session, values):
        calls.append(values)
        return None

    monkeypatch.setattr(pool, "find", never_finds)

    with pytest.raises(StoreError, match="Could not acquire"):
        with Session.begin() as session:
            store.acquire_text_id(session, "Hello")

    assert len(calls) == 2


def test_assemble_fingerprint_of_no_rows_is_empty():
    assert NormalizedStore.assemble_fingerprint([]) == Fingerprint()


def test_assemble_fingerprint_groups_rows_by_kind():
    rows = [
        _row("EnglishLabel", "en", TermType.LABEL),
        _row("EnglishDescription", "en", TermType.DESCRIPTION),
        _row("LeFrenchAlias", "fr", TermType.ALIAS),
        _row("LaFrenchAlias", "fr", TermType.ALIAS),
        _row("EnglishAlias", "en", TermType.ALIAS),
    ]

    assert NormalizedStore.assemble_fingerprint(rows) == Fingerprint(
        labels={"en": "EnglishLabel"},
        descriptions={"en": "EnglishDescription"},
        alias_groups={
            "fr": ["LeFrenchAlias", "LaFrenchAlias"],
            "en": ["EnglishAlias"],
        },
    )


def test_assemble_fingerprint_last_label_row_wins():
    rows = [
        _row("First", "en", TermType.LABEL),
        _row("Second", "en", TermType.LABEL),
    ]

    assert NormalizedStore.assemble_fingerprint(rows).labels == {"en": "Second"}


def test_assemble_fingerprint_skips_unknown_term_types():
    rows = [
        _row("EnglishLabel", "en", TermType.LABEL),
        _row("Mystery", "en", 99),
    ]

    assert NormalizedStore.assemble_fingerprint(rows) == Fingerprint(
        labels={"en": "EnglishLabel"}
    )
