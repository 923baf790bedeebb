"""
Database layer: connection manager with statement cache, versioned schema migrations, DataFrame reads.
"""

from __future__ import annotations

from .connection import DB, StatementCache
from .frames import query_frame, read_table
from .migrations import LATEST, SCHEMA_TABLE, Schema

__all__ = ["DB", "LATEST", "SCHEMA_TABLE", "Schema", "StatementCache", "query_frame", "read_table"]
