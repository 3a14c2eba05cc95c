"""Install or remove the term store tables.

Usage:
    term-store install                        # create missing tables
    term-store install --prefix wiki_         # side-by-side install with a prefix
    term-store status                         # list this store's existing tables
    term-store uninstall                      # with confirmation prompt
    term-store uninstall --yes                # skip confirmation

`--database-url` and `--prefix` default to `TERM_STORE_DATABASE_URL` and
`TERM_STORE_TABLE_PREFIX` (see `config.Config`).
"""

from __future__ import annotations

import argparse

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from config import Config
from db import make_engine
from logging_utils import configure_app_logging, get_logger
from models.tables import TableNames
from store.exceptions import StoreError
from store.schema import SchemaCreator
from store.term_store import TermStore

logger = get_logger(__name__)


def _confirm_or_exit(database_url: str, prefix: str, assume_yes: bool) -> None:
    """Prompt user for confirmation before dropping tables."""
    if assume_yes:
        return

    resp = input(
        f"\nThis will DROP the term store tables (prefix={prefix!r}) in:\n"
        f"  {make_url(database_url).render_as_string(hide_password=True)}\n\n"
        "ALL TERM DATA WILL BE LOST!\n\n"
        "Continue? [y/N]: "
    ).strip()
    if resp.lower() not in {"y", "yes"}:
        print("Aborted.")
        raise SystemExit(1)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    config = Config()

    parser = argparse.ArgumentParser(
        description="Manage the term store schema (install, uninstall, status)."
    )
    parser.add_argument(
        "--database-url",
        default=config.DATABASE_URL,
        help="SQLAlchemy database URL (default: TERM_STORE_DATABASE_URL).",
    )
    parser.add_argument(
        "--prefix",
        default=config.TABLE_PREFIX,
        help="Table name prefix (default: TERM_STORE_TABLE_PREFIX).",
    )
    parser.add_argument(
        "--busy-timeout-ms",
        type=int,
        default=config.SQLITE_BUSY_TIMEOUT_MS,
        help="SQLite lock wait in milliseconds (default: SQLITE_BUSY_TIMEOUT_MS).",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        help="Logging level (default: LOG_LEVEL).",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("install", help="Create missing tables (idempotent).")
    sub.add_parser("status", help="List existing term store tables.")
    p_uninstall = sub.add_parser("uninstall", help="Drop all term store tables.")
    p_uninstall.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not prompt for confirmation.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_app_logging(args.log_level)

    try:
        TableNames(args.prefix)
        engine = make_engine(args.database_url, busy_timeout_ms=args.busy_timeout_ms)
        store = TermStore(engine, table_prefix=args.prefix)
    except (ValueError, ArgumentError) as e:
        print(f"Invalid configuration: {e}")
        raise SystemExit(2) from e

    try:
        if args.command == "install":
            store.install(reporter=print)
        elif args.command == "uninstall":
            _confirm_or_exit(args.database_url, args.prefix, args.yes)
            store.uninstall(reporter=print)
        else:
            existing = SchemaCreator(engine, store.tables).existing_tables()
            if existing:
                print(f"Existing term store tables ({len(existing)}):")
                for name in existing:
                    print(f"  - {name}")
            else:
                print("Term store not installed.")
    except StoreError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"{args.command} failed: {e}")
        raise SystemExit(1) from e
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
