"""
DuckDB driver: optional backend for analytics-style databases.
duckdb is imported lazily; when it is not installed, connect() fails with DBConnectionError.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..errors import DBConnectionError
from .backend import DBAPIStatement, Driver, Statement


def _import_duckdb():
    try:
        import duckdb

        return duckdb
    except ImportError:
        return None


class DuckDBDriver(Driver):
    """
    Driver over the duckdb package. DSN is a database file path or ':memory:'.
    DuckDB compiles on execute, so parser/catalog/binder errors (all ProgrammingError) surface as PrepareError there.
    """

    name = "duckdb"

    def __init__(self) -> None:
        self._duckdb = _import_duckdb()

    def connect(self, dsn: str) -> Any:
        duck = self._duckdb
        if duck is None:
            raise DBConnectionError("duckdb driver requested but the duckdb package is not installed")
        try:
            return duck.connect(dsn)
        except duck.Error as e:
            raise DBConnectionError(f"duckdb: cannot open {dsn!r}: {e}") from e

    def close(self, native: Any) -> None:
        duck = self._duckdb
        try:
            native.close()
        except duck.Error as e:
            raise DBConnectionError(f"duckdb: close failed: {e}") from e

    def prepare(self, native: Any, sql: str, params: Sequence[Any]) -> Statement:
        duck = self._duckdb
        return DBAPIStatement(
            native,
            sql,
            missing_table_errors=(duck.CatalogException,),
            compile_errors=(duck.ProgrammingError,),
            errors=(duck.Error,),
        )
