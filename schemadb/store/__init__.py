"""
Store: driver interface, built-in drivers, driver registry, connection lifecycle helper.
No schema logic.
"""

from __future__ import annotations

from .backend import DBAPIStatement, Driver, DriverRegistry, Statement, default_registry
from .session import connected

__all__ = ["DBAPIStatement", "Driver", "DriverRegistry", "Statement", "connected", "default_registry"]
