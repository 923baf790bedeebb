"""
Driver interface and registry: open/close a native DB-API connection, prepare statements on it.
Registries are explicit objects handed to DB at construction; there is no process-wide driver table.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, Tuple, Type

from ..errors import ExecutionError, MissingTableError, PrepareError

logger = logging.getLogger(__name__)


class Statement(ABC):
    """
    A prepared statement bound to one native connection.
    Executable any number of times; each query() hands back a fresh cursor owned by the caller.
    """

    @abstractmethod
    def exec(self, params: Sequence[Any]) -> None:
        ...

    @abstractmethod
    def query(self, params: Sequence[Any]) -> Any:
        ...


class DBAPIStatement(Statement):
    """
    Generic DB-API 2.0 statement. Native compile errors (ProgrammingError: unknown table,
    syntax error, wrong number of parameters) surface as PrepareError, MissingTableError when the
    native error is one of missing_table_errors; everything else as ExecutionError.
    """

    def __init__(
        self,
        native: Any,
        sql: str,
        *,
        missing_table_errors: Tuple[Type[BaseException], ...] = (),
        compile_errors: Tuple[Type[BaseException], ...] = (),
        errors: Tuple[Type[BaseException], ...] = (Exception,),
    ) -> None:
        self._native = native
        self.sql = sql
        self._missing_table_errors = missing_table_errors
        self._compile_errors = compile_errors
        self._errors = errors

    def _run(self, params: Sequence[Any]) -> Any:
        cursor = self._native.cursor()
        try:
            if params:
                cursor.execute(self.sql, list(params))
            else:
                cursor.execute(self.sql)
        except self._missing_table_errors as e:
            cursor.close()
            raise MissingTableError(self.sql, str(e)) from e
        except self._compile_errors as e:
            cursor.close()
            raise PrepareError(self.sql, str(e)) from e
        except self._errors as e:
            cursor.close()
            raise ExecutionError(self.sql, str(e)) from e
        return cursor

    def exec(self, params: Sequence[Any]) -> None:
        self._run(params).close()

    def query(self, params: Sequence[Any]) -> Any:
        return self._run(params)


class Driver(ABC):
    """
    Database backend. Translates native failures into schemadb errors:
    open/close -> DBConnectionError, compile -> PrepareError, run -> ExecutionError.
    """

    name: str = ""

    @abstractmethod
    def connect(self, dsn: str) -> Any:
        """Open and return a native connection for dsn."""
        ...

    @abstractmethod
    def close(self, native: Any) -> None:
        ...

    @abstractmethod
    def prepare(self, native: Any, sql: str, params: Sequence[Any]) -> Statement:
        """
        Compile sql on native. params are the bindings of the call that triggered preparation;
        drivers that validate by compiling need concrete bindings. The statement itself is reusable with any params.
        """
        ...


class DriverRegistry:
    """
    Maps driver identifiers to driver instances.

    Usage:
        registry = DriverRegistry()
        registry.register("sqlite3", SQLiteDriver())
        db = DB("sqlite3", ":memory:", registry=registry)
    """

    def __init__(self) -> None:
        self._drivers: Dict[str, Driver] = {}

    def register(self, name: str, driver: Driver) -> None:
        """Register (or replace) a driver by name."""
        self._drivers[name] = driver
        logger.debug("Registered driver: %s", name)

    def resolve(self, name: str) -> Driver:
        driver = self._drivers.get(name)
        if driver is None:
            raise KeyError(f"Unknown driver '{name}'. Available: {list(self._drivers)}")
        return driver

    def __contains__(self, name: object) -> bool:
        return name in self._drivers

    @property
    def names(self) -> List[str]:
        return list(self._drivers)


def default_registry() -> DriverRegistry:
    """Return a new registry holding the built-in drivers (sqlite3, duckdb)."""
    from .duckdb_backend import DuckDBDriver
    from .sqlite_backend import SQLiteDriver

    registry = DriverRegistry()
    registry.register(SQLiteDriver.name, SQLiteDriver())
    registry.register(DuckDBDriver.name, DuckDBDriver())
    return registry
