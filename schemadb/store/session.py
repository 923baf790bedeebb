"""
DB connection lifecycle: context manager with guaranteed disconnect.
Use for scoped access so file-backed databases are released as soon as the block exits.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator

if TYPE_CHECKING:
    from ..db.connection import DB


@contextmanager
def connected(db: "DB") -> Generator["DB", None, None]:
    """
    Yield db connected (connecting it if needed); always disconnect on exit.
    Disconnect also drops the statement cache.
    """
    db.connect()
    try:
        yield db
    finally:
        db.disconnect()
