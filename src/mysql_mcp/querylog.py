"""Query log — daily JSONL files per database, with automatic retention cleanup."""

from __future__ import annotations

import contextlib
import json
import logging
import re
from datetime import UTC, datetime, timedelta
from pathlib import Path

DEFAULT_RETENTION_DAYS = 30
_LOG_ROOT = Path.home() / ".mysql-mcp" / "logs"

logger = logging.getLogger(__name__)


def _database_slug(database: str | None) -> str:
    """Directory-safe name for a database; unnamed databases share 'default'."""
    slug = re.sub(r"[^A-Za-z0-9_.-]+", "-", database or "").strip("-.")
    return slug or "default"


def _log_dir(database: str | None) -> Path:
    return _LOG_ROOT / _database_slug(database)


def _today_file(database: str | None) -> Path:
    today = datetime.now(UTC).strftime("%Y-%m-%d")
    return _log_dir(database) / f"{today}.jsonl"


def log_query(
    *,
    tool: str,
    sql: str,
    database: str | None = None,
    kind: str | None = None,
    permitted: bool = True,
    reason: str | None = None,
    code: str | None = None,
    tables: list[str] | None = None,
    duration_ms: float | None = None,
    error: str | None = None,
) -> None:
    """Append a query log entry to today's JSONL file.

    Write failures are reported through logging and never reach the caller:
    the log is an audit trail, not part of the tool response.
    """
    entry = {
        "ts": datetime.now(UTC).isoformat(),
        "tool": tool,
        "database": database,
        "sql": sql,
        "kind": kind,
        "permitted": permitted,
        "reason": reason or None,
        "code": code,
        "tables": tables or [],
        "duration_ms": duration_ms,
        "error": error,
    }

    log_file = _today_file(database)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        logger.warning("Could not write query log %s: %s", log_file, e)


def cleanup_old_logs(
    database: str | None = None, *, retention_days: int = DEFAULT_RETENTION_DAYS
) -> int:
    """Delete log files older than retention_days. Returns count of deleted files."""
    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0

    log_dir = _log_dir(database)
    if not log_dir.exists():
        return 0

    for log_file in log_dir.glob("*.jsonl"):
        # Parse date from filename (YYYY-MM-DD.jsonl)
        try:
            file_date = datetime.strptime(log_file.stem, "%Y-%m-%d").replace(tzinfo=UTC)
        except ValueError:
            continue
        if file_date < cutoff:
            log_file.unlink()
            deleted += 1

    # Remove empty database directories
    with contextlib.suppress(OSError):
        log_dir.rmdir()

    return deleted
