"""
SQLite driver: stdlib sqlite3, autocommit, foreign_keys=ON.
Default driver; statements are compiled with EXPLAIN before first use so bad SQL fails as PrepareError.
A database that cannot be read at all (locked, not a database, corrupt, closed) fails as DBConnectionError instead.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Sequence

from ..errors import DBConnectionError, MissingTableError, PrepareError
from .backend import DBAPIStatement, Driver, Statement

logger = logging.getLogger(__name__)

# sqlite3 error messages meaning the database itself is unusable, not the statement
_UNUSABLE_MARKERS = (
    "database is locked",
    "database table is locked",
    "file is not a database",
    "database disk image is malformed",
    "unable to open database",
    "disk i/o error",
    "closed database",
)


def _explain(sql: str) -> str:
    if sql.lstrip()[:7].upper() == "EXPLAIN":
        return sql
    return f"EXPLAIN {sql}"


def _is_unusable(e: sqlite3.Error) -> bool:
    message = str(e).lower()
    return any(marker in message for marker in _UNUSABLE_MARKERS)


class SQLiteDriver(Driver):
    """
    Driver over the stdlib sqlite3 module. DSN is a filesystem path, ':memory:' or a 'file:' URI.
    timeout is how long (seconds) a statement waits on another connection's lock before failing.
    """

    name = "sqlite3"

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout

    def connect(self, dsn: str) -> sqlite3.Connection:
        try:
            # isolation_level=None: every statement commits on its own.
            # check_same_thread=False: DB serializes dispatch with its own lock.
            conn = sqlite3.connect(
                dsn,
                timeout=self.timeout,
                isolation_level=None,
                check_same_thread=False,
                uri=dsn.startswith("file:"),
            )
        except sqlite3.Error as e:
            raise DBConnectionError(f"sqlite3: cannot open {dsn!r}: {e}") from e
        try:
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            conn.close()
            raise DBConnectionError(f"sqlite3: cannot initialize {dsn!r}: {e}") from e
        return conn

    def close(self, native: sqlite3.Connection) -> None:
        try:
            native.close()
        except sqlite3.Error as e:
            raise DBConnectionError(f"sqlite3: close failed: {e}") from e

    def prepare(self, native: sqlite3.Connection, sql: str, params: Sequence[Any]) -> Statement:
        try:
            native.execute(_explain(sql), tuple(params)).close()
        except sqlite3.Error as e:
            if _is_unusable(e):
                raise DBConnectionError(f"sqlite3: database unusable: {e}") from e
            if isinstance(e, sqlite3.OperationalError) and str(e).startswith("no such table"):
                raise MissingTableError(sql, str(e)) from e
            raise PrepareError(sql, str(e)) from e
        return DBAPIStatement(native, sql, errors=(sqlite3.Error,))
