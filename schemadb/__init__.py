"""
Top-level public API surface.
Canonical entrypoint: import schemadb; use schemadb.DB, schemadb.Schema, schemadb.LATEST.
"""

from __future__ import annotations

from ._version import __version__
from .config import DatabaseConfig, database_config
from .db import DB, LATEST, SCHEMA_TABLE, Schema, StatementCache, query_frame, read_table
from .errors import (
    DatabaseError,
    DBConnectionError,
    ExecutionError,
    MigrationError,
    MissingTableError,
    NotConnectedError,
    PrepareError,
    SchemaConfigError,
)
from .store import DriverRegistry, connected, default_registry

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "DB",
    "DBConnectionError",
    "DatabaseConfig",
    "DatabaseError",
    "DriverRegistry",
    "ExecutionError",
    "LATEST",
    "MigrationError",
    "MissingTableError",
    "NotConnectedError",
    "PrepareError",
    "SCHEMA_TABLE",
    "Schema",
    "SchemaConfigError",
    "StatementCache",
    "connected",
    "database_config",
    "default_registry",
    "query_frame",
    "read_table",
]
