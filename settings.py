"""Term store settings.

Defaults for `config.Config`. Environment variables of the same name win.

For now this file uses a simple dict-like structure.
"""

import os

# Single source of truth for default configuration.
SETTINGS: dict[str, object] = {
    # Database
    "TERM_STORE_DATABASE_URL": "sqlite:///"
    + os.path.join(os.path.dirname(__file__), "data", "term_store.db"),
    # Prepended to every table/index name; letters, digits and "_" only.
    "TERM_STORE_TABLE_PREFIX": "",
    # Create missing tables when building a store from config.
    "TERM_STORE_AUTO_INSTALL": False,
    # SQLite lock wait in milliseconds.
    "SQLITE_BUSY_TIMEOUT_MS": 5000,
    # Logging
    "LOG_LEVEL": "INFO",
    "LOG_DIR": os.path.join(os.path.dirname(__file__), "logs"),
}

# Optional convenience exports.
TERM_STORE_DATABASE_URL = SETTINGS["TERM_STORE_DATABASE_URL"]
TERM_STORE_TABLE_PREFIX = SETTINGS["TERM_STORE_TABLE_PREFIX"]
LOG_LEVEL = SETTINGS["LOG_LEVEL"]
