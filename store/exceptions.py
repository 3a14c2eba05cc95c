"""Exception hierarchy for the term store."""

from __future__ import annotations


class TermStoreError(Exception):
    """Base exception for all term store errors."""


class StoreError(TermStoreError):
    """Infrastructure failure (connectivity, query failure, unresolved conflict).

    Attributes:
        message: Message of the underlying failure.
        code: Driver error code when one is available (e.g. SQLite extended
            error code, PostgreSQL SQLSTATE), else SQLAlchemy's error code.
    """

    def __init__(self, message: str, code: int | str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    @classmethod
    def from_exception(cls, ex: Exception, context: str = "") -> StoreError:
        """Wrap a database client exception, keeping its message and code."""

        orig = getattr(ex, "orig", None)
        source = orig if orig is not None else ex

        code = (
            getattr(source, "sqlite_errorcode", None)
            or getattr(source, "pgcode", None)
            or getattr(ex, "code", None)
        )
        message = str(source) or type(source).__name__
        if context:
            message = f"{context}: {message}"
        return cls(message, code)
