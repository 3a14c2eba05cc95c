from __future__ import annotations

import os
import shutil
import tempfile
from typing import TYPE_CHECKING, Generator

import pytest

if TYPE_CHECKING:
    from models.fingerprint import Fingerprint
    from store.entity_term_store import EntityTermStore
    from store.term_store import TermStore

PREFIX = "prefix_"

# Project modules attach their log file handlers on import, so LOG_DIR must be
# set before any of them is imported (test modules load after this hook).
_LOG_DIR_ENV = "LOG_DIR"


def pytest_configure(config):
    if os.environ.get(_LOG_DIR_ENV):
        return
    log_dir = tempfile.mkdtemp(prefix="term_store_test_logs_")
    os.environ[_LOG_DIR_ENV] = log_dir
    config._term_store_log_dir = log_dir


def pytest_unconfigure(config):
    log_dir = getattr(config, "_term_store_log_dir", None)
    if log_dir:
        os.environ.pop(_LOG_DIR_ENV, None)
        shutil.rmtree(log_dir, ignore_errors=True)


@pytest.fixture()
def term_store(tmp_path) -> Generator[TermStore, None, None]:
    """Installed, prefixed term store backed by a temp SQLite file."""

    from pytests.common import create_installed_term_store

    store, engine = create_installed_term_store(tmp_path / "terms.sqlite", PREFIX)
    try:
        yield store
    finally:
        engine.dispose()


@pytest.fixture()
def item_store(term_store) -> EntityTermStore:
    return term_store.new_item_term_store()


@pytest.fixture()
def property_store(term_store) -> EntityTermStore:
    return term_store.new_property_term_store()


@pytest.fixture()
def many_terms() -> Fingerprint:
    from models.fingerprint import Fingerprint

    return Fingerprint(
        labels={
            "en": "EnglishLabel",
            "de": "ZeGermanLabel",
            "fr": "LeFrenchLabel",
        },
        descriptions={
            "en": "EnglishDescription",
            "de": "ZeGermanDescription",
        },
        alias_groups={
            "fr": ["LeFrenchAlias", "LaFrenchAlias"],
            "en": ["EnglishAlias"],
        },
    )
