"""
Connection manager: one live connection, a prepared-statement cache, an exclusive lock.

Every exec()/query() takes the lock for statement lookup/preparation and dispatch.
query() releases it before the caller consumes the returned cursor, so cursor
iteration can interleave with other calls on the same DB. Disconnecting while
such a cursor is still being read is the caller's problem.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from ..config import DatabaseConfig
from ..errors import NotConnectedError
from ..store.backend import DriverRegistry, Statement, default_registry

logger = logging.getLogger(__name__)


class StatementCache:
    """Exact query text -> prepared statement. Only valid for the connection that prepared the entries."""

    def __init__(self) -> None:
        self._statements: Dict[str, Statement] = {}

    def get(self, sql: str) -> Optional[Statement]:
        return self._statements.get(sql)

    def put(self, sql: str, statement: Statement) -> None:
        self._statements[sql] = statement

    def __contains__(self, sql: object) -> bool:
        return sql in self._statements

    def __len__(self) -> int:
        return len(self._statements)


class DB:
    """
    Single point of access to one database connection.

    Usage:
        db = DB("sqlite3", "app.sqlite")
        db.connect()
        db.exec("INSERT INTO foo (id, value) VALUES (?, ?)", 1, "a")
        n = db.count("SELECT * FROM foo")
    """

    def __init__(self, driver: str, dsn: str, registry: Optional[DriverRegistry] = None) -> None:
        self._config = DatabaseConfig(driver=driver, dsn=dsn)
        self._registry = registry if registry is not None else default_registry()
        self._driver = self._registry.resolve(driver)
        self._exclusive = threading.Lock()
        self._connection: Any = None
        self._cache: Optional[StatementCache] = None

    @classmethod
    def from_config(cls, config: DatabaseConfig, registry: Optional[DriverRegistry] = None) -> "DB":
        return cls(config.driver, config.dsn, registry=registry)

    @property
    def driver(self) -> str:
        return self._config.driver

    @property
    def dsn(self) -> str:
        return self._config.dsn

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def cache(self) -> StatementCache:
        """Current statement cache (empty when never connected)."""
        if self._cache is None:
            return StatementCache()
        return self._cache

    def copy(self) -> "DB":
        """Same driver/DSN/registry; disconnected, empty cache."""
        return DB(self.driver, self.dsn, registry=self._registry)

    @property
    def connected(self) -> bool:
        return self._connection is not None

    def connect(self) -> None:
        """Open the backend connection. No-op when already connected."""
        if self._connection is not None:
            logger.debug("Already connected to %s database", self.driver)
            return
        self._connection = self._driver.connect(self.dsn)
        if self._cache is None:
            self._cache = StatementCache()
        logger.debug("Connected to %s database", self.driver)

    def disconnect(self) -> None:
        """Close the backend connection and drop every cached statement."""
        if self._connection is None:
            return
        self._driver.close(self._connection)
        self._connection = None
        self._cache = StatementCache()
        logger.debug("Disconnected from %s database", self.driver)

    def exec(self, sql: str, *args: Any) -> None:
        """Execute a non-data statement (INSERT, UPDATE, DELETE, DDL)."""
        with self._exclusive:
            s = self._statement(sql, args)
            logger.debug("Parameters: %s", args)
            s.exec(args)

    def query(self, sql: str, *args: Any) -> Any:
        """
        Execute a data statement (SELECT) and return its cursor.
        The caller owns the cursor and must close it.
        """
        with self._exclusive:
            s = self._statement(sql, args)
            logger.debug("Parameters: %s", args)
            return s.query(args)

    def count(self, sql: str, *args: Any) -> int:
        """Execute a data statement and return how many rows it produced."""
        cursor = self.query(sql, *args)
        try:
            n = 0
            while cursor.fetchone() is not None:
                n += 1
            return n
        finally:
            cursor.close()

    def _statement(self, sql: str, params: Any) -> Statement:
        """Cached prepared statement for sql, preparing it on a miss. Caller holds self._exclusive."""
        if self._connection is None:
            raise NotConnectedError()

        logger.debug("Executing SQL: %s", sql)

        s = self._cache.get(sql)
        if s is None:
            s = self._driver.prepare(self._connection, sql, params)
            self._cache.put(sql, s)
        return s

    def __repr__(self) -> str:
        state = "connected" if self.connected else "disconnected"
        return f"DB(driver={self.driver!r}, dsn={self.dsn!r}, {state})"
