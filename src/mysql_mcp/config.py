"""Server configuration — environment variables parsed once into immutable values.

Nothing outside this module reads ``os.environ``; the CLI builds a
``ServerConfig`` at startup and hands its parts to the adapter, the policy
engine and the dispatcher.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from mysql_mcp.adapters._base import ConnectionConfig
from mysql_mcp.policy.capabilities import DEFAULT_MAX_ROWS, CapabilityPolicy

_TRUTHY = frozenset({"true", "1", "yes", "on"})
_FALSY = frozenset({"false", "0", "no", "off"})

# Environment variable → CapabilityPolicy field
POLICY_FLAGS: dict[str, str] = {
    "ALLOW_DDL": "allow_ddl",
    "ALLOW_DML": "allow_dml",
    "ALLOW_DROP": "allow_drop",
    "ALLOW_CREATE": "allow_create",
    "ALLOW_ALTER": "allow_alter",
    "ALLOW_INSERT": "allow_insert",
    "ALLOW_UPDATE": "allow_update",
    "ALLOW_DELETE": "allow_delete",
    "ALLOW_TRUNCATE": "allow_truncate",
    "REQUIRE_DELETE_WHERE": "require_delete_where",
}


class ConfigError(ValueError):
    """Raised when an environment variable holds a malformed value."""


@dataclass(frozen=True)
class ServerConfig:
    database: ConnectionConfig = field(default_factory=ConnectionConfig)
    policy: CapabilityPolicy = field(default_factory=CapabilityPolicy)
    query_log: bool = True
    query_log_retention_days: int = 30
    log_level: str = "INFO"

    def describe(self) -> dict[str, object]:
        """Effective settings for startup logging, with the password masked."""
        db = self.database
        return {
            "DB_HOST": db.host,
            "DB_PORT": db.port,
            "DB_USER": db.user or "(not set)",
            "DB_PASSWORD": "***" if db.password else "(not set)",
            "DB_NAME": db.database or "(not set)",
            "DB_POOL_SIZE": db.pool_size,
            "QUERY_TIMEOUT": db.query_timeout,
        }


def _get(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = _get(environ, name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got {value!r}")


def _int(environ: Mapping[str, str], name: str, default: int, *, minimum: int = 1) -> int:
    value = _get(environ, name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if parsed < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


def _timeout(environ: Mapping[str, str], name: str, default: float) -> float | None:
    value = _get(environ, name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number of seconds, got {value!r}") from e
    # 0 disables the timeout.
    return parsed if parsed > 0 else None


def load_policy(environ: Mapping[str, str]) -> CapabilityPolicy:
    flags = {attr: _bool(environ, env, False) for env, attr in POLICY_FLAGS.items()}
    return CapabilityPolicy(
        **flags,
        max_rows=_int(environ, "MAX_ROWS", DEFAULT_MAX_ROWS),
        enforce_explain=_bool(environ, "ENFORCE_EXPLAIN", True),
    )


def load_connection(environ: Mapping[str, str]) -> ConnectionConfig:
    return ConnectionConfig(
        host=_get(environ, "DB_HOST") or "localhost",
        port=_int(environ, "DB_PORT", 3306),
        user=_get(environ, "DB_USER") or "",
        password=environ.get("DB_PASSWORD", ""),
        database=_get(environ, "DB_NAME") or "",
        pool_size=_int(environ, "DB_POOL_SIZE", 5),
        query_timeout=_timeout(environ, "QUERY_TIMEOUT", 30.0),
    )


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    env_file: str | Path | None = None,
) -> ServerConfig:
    """Build a ServerConfig from the environment.

    When ``environ`` is None, ``env_file`` (or a ``.env`` in the working
    directory) is loaded into the process environment first, without
    overriding variables that are already set.

    Raises ConfigError for malformed values. Missing credentials are not an
    error: they leave ``database.is_complete`` False (demo mode).
    """
    if environ is None:
        load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True))
        environ = os.environ

    return ServerConfig(
        database=load_connection(environ),
        policy=load_policy(environ),
        query_log=_bool(environ, "QUERY_LOG", True),
        query_log_retention_days=_int(environ, "QUERY_LOG_RETENTION_DAYS", 30),
        log_level=(_get(environ, "LOG_LEVEL") or "INFO").upper(),
    )
