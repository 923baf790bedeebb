"""
Versioned schema migrations. Tracks the applied version in schema_info (one row, one column);
applies pending steps in ascending version and records progress after every step, so a failure
leaves schema_info at the last step that succeeded. No rollback: a step must leave the database
consistent if it fails part way.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import (
    DatabaseError,
    DBConnectionError,
    ExecutionError,
    MigrationError,
    MissingTableError,
    NotConnectedError,
    PrepareError,
    SchemaConfigError,
)
from .connection import DB

logger = logging.getLogger(__name__)

# Target meaning "every registered version above current"
LATEST = -1

SCHEMA_TABLE = "schema_info"

MigrationFn = Callable[[DB], None]

# (version, name, apply_function)
Migration = Tuple[int, str, MigrationFn]


class Schema:
    """
    Registry of migration steps keyed by positive integer version.

    Usage:
        schema = Schema()
        schema.version(1, lambda db: db.exec("CREATE TABLE foo (id INTEGER PRIMARY KEY, value TEXT)"))

        @schema.version(2, name="foo_index")
        def _add_index(db):
            db.exec("CREATE INDEX idx_foo_value ON foo(value)")

        schema.migrate(db, LATEST)
    """

    def __init__(self) -> None:
        self._steps: Dict[int, Migration] = {}

    def version(self, n: int, fn: Optional[MigrationFn] = None, *, name: Optional[str] = None):
        """
        Register fn as the migration to version n. Without fn, return a decorator.
        Raises SchemaConfigError for non-positive or already registered versions.
        """
        if fn is None:

            def decorator(f: MigrationFn) -> MigrationFn:
                self.version(n, f, name=name)
                return f

            return decorator

        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise SchemaConfigError(f"migration version must be a positive integer, got {n!r}")
        if n in self._steps:
            raise SchemaConfigError(f"migration version {n} is already registered")
        self._steps[n] = (n, name or getattr(fn, "__name__", f"v{n}"), fn)
        return fn

    @property
    def versions(self) -> List[int]:
        return sorted(self._steps)

    @property
    def latest(self) -> int:
        return max(self._steps, default=0)

    def current(self, db: DB) -> int:
        """
        Version recorded in schema_info; 0 when the table does not exist yet or holds no row.
        Raises DBConnectionError when db cannot be queried.
        """
        try:
            cursor = db.query(f"SELECT version FROM {SCHEMA_TABLE}")
        except MissingTableError:
            # no schema_info table: never migrated
            return 0
        except (NotConnectedError, PrepareError, ExecutionError) as e:
            raise DBConnectionError(f"cannot read {SCHEMA_TABLE}: {e}") from e
        try:
            row = cursor.fetchone()
        finally:
            cursor.close()
        if row is None or row[0] is None:
            return 0
        return int(row[0])

    def pending(self, current: int, target: int = LATEST) -> List[Migration]:
        """Steps with current < version <= target (no upper bound for LATEST), ascending."""
        return [
            self._steps[v]
            for v in sorted(self._steps)
            if v > current and (target == LATEST or v <= target)
        ]

    def migrate(self, db: DB, target: int = LATEST) -> int:
        """
        Bring db up to target (LATEST for everything registered). Returns the version reached.
        Raises SchemaConfigError for an invalid target or a downgrade request,
        DBConnectionError when the current version cannot be read,
        MigrationError (chained to the cause) when a step or the version update after it fails.
        """
        if target != LATEST and (isinstance(target, bool) or not isinstance(target, int) or target < 1):
            raise SchemaConfigError(f"migration target must be LATEST or a positive integer, got {target!r}")

        current = self.current(db)
        if target != LATEST and target < current:
            raise SchemaConfigError(f"cannot migrate down from version {current} to {target}")

        self._ensure_schema_table(db)

        steps = self.pending(current, target)
        if not steps:
            logger.debug("Schema already at version %s; nothing to apply", current)
            return current

        for version, name, apply_fn in steps:
            try:
                apply_fn(db)
            except Exception as e:
                logger.error("Migration %s (%s) failed: %s", version, name, e)
                raise MigrationError(version, e) from e
            try:
                db.exec(f"UPDATE {SCHEMA_TABLE} SET version = ?", version)
            except DatabaseError as e:
                logger.error("Migration %s (%s) applied but recording the version failed: %s", version, name, e)
                raise MigrationError(version, e) from e
            current = version
            logger.info("Applied migration %s: %s", version, name)
        return current

    def _ensure_schema_table(self, db: DB) -> None:
        db.exec(f"CREATE TABLE IF NOT EXISTS {SCHEMA_TABLE} (version INTEGER NOT NULL)")
        if db.count(f"SELECT version FROM {SCHEMA_TABLE}") == 0:
            db.exec(f"INSERT INTO {SCHEMA_TABLE} (version) VALUES (?)", 0)
