"""DataFrame reads through DB.query."""

from __future__ import annotations

from schemadb.db.connection import DB
from schemadb.db.frames import query_frame, read_table


def _db_with_rows() -> DB:
    db = DB("sqlite3", ":memory:")
    db.connect()
    db.exec("CREATE TABLE prices (symbol TEXT, price REAL)")
    for sym, px in (("BTC", 100.0), ("ETH", 10.0), ("SOL", 1.0)):
        db.exec("INSERT INTO prices (symbol, price) VALUES (?, ?)", sym, px)
    return db


def test_query_frame_columns_and_rows():
    db = _db_with_rows()
    df = query_frame(db, "SELECT symbol, price FROM prices WHERE price > ? ORDER BY price", 5.0)
    assert list(df.columns) == ["symbol", "price"]
    assert df["symbol"].tolist() == ["ETH", "BTC"]
    db.disconnect()


def test_query_frame_empty_result_keeps_columns():
    db = _db_with_rows()
    df = query_frame(db, "SELECT symbol FROM prices WHERE price < 0")
    assert df.empty
    assert list(df.columns) == ["symbol"]
    db.disconnect()


def test_read_table_columns_and_limit():
    db = _db_with_rows()
    df = read_table(db, "prices", columns=["symbol"], limit=2)
    assert list(df.columns) == ["symbol"]
    assert len(df) == 2
    assert len(read_table(db, "prices")) == 3
    db.disconnect()
