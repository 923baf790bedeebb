"""Driver registry: explicit registries, built-in drivers, injected drivers and their error translation."""

from __future__ import annotations

import sqlite3

import pytest

from schemadb.db.connection import DB
from schemadb.errors import DBConnectionError
from schemadb.store.backend import DBAPIStatement, Driver, DriverRegistry, default_registry
from schemadb.store.sqlite_backend import SQLiteDriver


class _FlakyCloseDriver(SQLiteDriver):
    """sqlite3 driver whose close always fails."""

    name = "flaky"

    def close(self, native):
        raise DBConnectionError("simulated close failure")


class _RecordingDriver(Driver):
    """Counts prepare() calls; delegates to sqlite3 without compiling."""

    name = "recording"

    def __init__(self) -> None:
        self.prepared = []

    def connect(self, dsn):
        return sqlite3.connect(dsn, isolation_level=None)

    def close(self, native):
        native.close()

    def prepare(self, native, sql, params):
        self.prepared.append(sql)
        return DBAPIStatement(native, sql, errors=(sqlite3.Error,))


def test_default_registry_has_builtin_drivers():
    registry = default_registry()
    assert "sqlite3" in registry
    assert "duckdb" in registry
    assert set(registry.names) >= {"sqlite3", "duckdb"}


def test_default_registry_returns_independent_instances():
    a = default_registry()
    b = default_registry()
    a.register("recording", _RecordingDriver())
    assert "recording" in a
    assert "recording" not in b


def test_unknown_driver_raises_key_error():
    with pytest.raises(KeyError, match="postgres"):
        DB("postgres", "host=127.86.86.86 port=8686")
    with pytest.raises(KeyError):
        DriverRegistry().resolve("sqlite3")


def test_injected_driver_is_used_and_statements_prepared_once():
    driver = _RecordingDriver()
    registry = DriverRegistry()
    registry.register("recording", driver)
    db = DB("recording", ":memory:", registry=registry)
    db.connect()
    db.exec("CREATE TABLE t (x INTEGER)")
    for i in range(3):
        db.exec("INSERT INTO t (x) VALUES (?)", i)
    assert db.count("SELECT * FROM t") == 3
    assert driver.prepared.count("INSERT INTO t (x) VALUES (?)") == 1
    db.disconnect()


def test_cache_dropped_on_disconnect_forces_prepare_again():
    driver = _RecordingDriver()
    registry = DriverRegistry()
    registry.register("recording", driver)
    db = DB("recording", ":memory:", registry=registry)
    db.connect()
    db.exec("SELECT 1")
    db.disconnect()
    db.connect()
    db.exec("SELECT 1")
    assert driver.prepared == ["SELECT 1", "SELECT 1"]
    db.disconnect()


def test_copy_keeps_registry():
    registry = DriverRegistry()
    registry.register("recording", _RecordingDriver())
    db = DB("recording", ":memory:", registry=registry)
    dup = db.copy()
    dup.connect()
    assert dup.connected
    dup.disconnect()


def test_close_failure_raises_connection_error():
    registry = DriverRegistry()
    registry.register("flaky", _FlakyCloseDriver())
    db = DB("flaky", ":memory:", registry=registry)
    db.connect()
    with pytest.raises(DBConnectionError, match="simulated close failure"):
        db.disconnect()


def test_duckdb_driver_roundtrip():
    """DuckDB driver: exec/query/count through the same DB surface."""
    pytest.importorskip("duckdb")
    db = DB("duckdb", ":memory:")
    db.connect()
    db.exec("CREATE TABLE foo (id INTEGER PRIMARY KEY, value VARCHAR)")
    db.exec("INSERT INTO foo VALUES (?, ?)", 1, "a")
    db.exec("INSERT INTO foo VALUES (?, ?)", 2, "b")
    assert db.count("SELECT * FROM foo") == 2
    cur = db.query("SELECT value FROM foo WHERE id = ?", 2)
    assert cur.fetchone() == ("b",)
    cur.close()
    db.disconnect()
