"""Schema migrations on the optional DuckDB driver: missing schema_info reads as version 0."""

from __future__ import annotations

import pytest

from schemadb.db.connection import DB
from schemadb.db.migrations import LATEST, Schema
from schemadb.errors import MigrationError, MissingTableError


def test_duckdb_current_and_migrate():
    pytest.importorskip("duckdb")
    db = DB("duckdb", ":memory:")
    db.connect()
    s = Schema()
    s.version(1, lambda d: d.exec("CREATE TABLE foo (id INTEGER, value VARCHAR)"))
    assert s.current(db) == 0
    assert s.migrate(db, LATEST) == 1
    assert s.current(db) == 1
    assert db.count("SELECT * FROM foo") == 0
    db.disconnect()


def test_duckdb_missing_table_is_missing_table_error():
    pytest.importorskip("duckdb")
    db = DB("duckdb", ":memory:")
    db.connect()
    with pytest.raises(MissingTableError):
        db.exec("SELECT * FROM no_such_table")
    s = Schema()
    s.version(1, lambda d: d.exec("SELECT * FROM no_such_table"))
    with pytest.raises(MigrationError):
        s.migrate(db)
    assert s.current(db) == 0
    db.disconnect()
