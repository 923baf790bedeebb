"""
Error taxonomy for the connection manager and the migrator.
Native driver exceptions are always chained (raise ... from exc) so the backend cause stays visible.
"""

from __future__ import annotations

from typing import Optional


class DatabaseError(Exception):
    """Base class for every error raised by schemadb."""


class NotConnectedError(DatabaseError):
    """Operation attempted with no live connection."""

    def __init__(self, message: str = "Not connected to database") -> None:
        super().__init__(message)


class DBConnectionError(DatabaseError):
    """Opening/closing the underlying connection failed, or it is unusable."""


class PrepareError(DatabaseError):
    """Statement text could not be compiled by the backend."""

    def __init__(self, query: str, message: Optional[str] = None) -> None:
        self.query = query
        super().__init__(message or f"could not prepare statement: {query}")


class MissingTableError(PrepareError):
    """Statement references a table the database does not have."""


class ExecutionError(DatabaseError):
    """A compiled statement failed while running (constraint violation, type mismatch, ...)."""

    def __init__(self, query: str, message: Optional[str] = None) -> None:
        self.query = query
        super().__init__(message or f"statement failed: {query}")


class MigrationError(DatabaseError):
    """
    A registered migration step failed, or recording its version afterwards did.
    version is the step concerned; cause is what was raised.
    """

    def __init__(self, version: int, cause: BaseException) -> None:
        self.version = version
        self.cause = cause
        super().__init__(f"migration to version {version} failed: {cause}")


class SchemaConfigError(DatabaseError, ValueError):
    """Invalid schema registry usage: duplicate or non-positive versions, bad target, downgrade."""
