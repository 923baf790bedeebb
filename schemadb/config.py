"""
Load database config from config.yaml with optional env overrides.
Single source of truth for the default driver and DSN.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

# Defaults if no YAML or env
_DEFAULTS = {
    "db": {
        "driver": "sqlite3",
        "dsn": ":memory:",
    },
}


@dataclass(frozen=True)
class DatabaseConfig:
    """Driver identifier + opaque DSN. Immutable; shared by value between DB copies."""

    driver: str
    dsn: str


def _config_yaml_path() -> Path:
    """SCHEMADB_CONFIG if set, else config.yaml at repo root (parent of package dir)."""
    override = os.environ.get("SCHEMADB_CONFIG", "").strip()
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    config_path = _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    driver = os.environ.get("SCHEMADB_DRIVER")
    if driver:
        overrides.setdefault("db", {})["driver"] = driver
    dsn = os.environ.get("SCHEMADB_DSN")
    if dsn:
        overrides.setdefault("db", {})["dsn"] = dsn
    return overrides


def get_config() -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml())
    merged = _deep_merge(merged, _env_overrides())
    return merged


def db_driver() -> str:
    return str(get_config()["db"]["driver"])


def db_dsn() -> str:
    return str(get_config()["db"]["dsn"])


def database_config() -> DatabaseConfig:
    db = get_config()["db"]
    return DatabaseConfig(driver=str(db["driver"]), dsn=str(db["dsn"]))
