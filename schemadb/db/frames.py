"""
Tabular reads into pandas DataFrames through DB.query (same lock/cache discipline as every other read).
"""

from __future__ import annotations

from typing import Any, List, Optional

import pandas as pd

from .connection import DB


def query_frame(db: DB, sql: str, *args: Any) -> pd.DataFrame:
    """Run sql and return all rows as a DataFrame; columns come from the cursor description."""
    cursor = db.query(sql, *args)
    try:
        columns = [d[0] for d in cursor.description] if cursor.description else []
        rows = cursor.fetchall()
    finally:
        cursor.close()
    return pd.DataFrame.from_records(rows, columns=columns)


def read_table(
    db: DB,
    table: str,
    *,
    columns: Optional[List[str]] = None,
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """Read table as DataFrame."""
    cols = ", ".join(columns) if columns else "*"
    q = f"SELECT {cols} FROM {table}"
    if limit is not None:
        q += f" LIMIT {int(limit)}"
    return query_frame(db, q)
