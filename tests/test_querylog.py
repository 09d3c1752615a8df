"""Test query logging — daily JSONL files with retention cleanup."""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from mysql_mcp.querylog import _database_slug, cleanup_old_logs, log_query


def test_database_slug():
    assert _database_slug("shop") == "shop"
    assert _database_slug("my shop/prod") == "my-shop-prod"
    assert _database_slug(None) == "default"
    assert _database_slug("///") == "default"


def test_log_query_creates_file(tmp_path):
    """log_query creates a daily JSONL file and appends an entry."""
    with patch("mysql_mcp.querylog._LOG_ROOT", tmp_path):
        log_query(tool="mysql_query", sql="SELECT 1 LIMIT 1", database="shop", kind="select")

    db_dir = tmp_path / "shop"
    assert db_dir.exists()

    log_files = list(db_dir.glob("*.jsonl"))
    assert len(log_files) == 1

    today = datetime.now(UTC).strftime("%Y-%m-%d")
    assert log_files[0].name == f"{today}.jsonl"

    entry = json.loads(log_files[0].read_text().strip())
    assert entry["sql"] == "SELECT 1 LIMIT 1"
    assert entry["tool"] == "mysql_query"
    assert entry["database"] == "shop"
    assert entry["kind"] == "select"
    assert entry["permitted"] is True
    assert entry["tables"] == []
    assert "ts" in entry


def test_log_query_appends_to_existing(tmp_path):
    """Multiple log calls append to the same daily file."""
    with patch("mysql_mcp.querylog._LOG_ROOT", tmp_path):
        log_query(tool="mysql_query", sql="SELECT 1 LIMIT 1")
        log_query(tool="mysql_query", sql="SELECT 2 LIMIT 1")

    log_files = list((tmp_path / "default").glob("*.jsonl"))
    assert len(log_files) == 1

    lines = log_files[0].read_text().strip().split("\n")
    assert len(lines) == 2
    assert json.loads(lines[0])["sql"] == "SELECT 1 LIMIT 1"
    assert json.loads(lines[1])["sql"] == "SELECT 2 LIMIT 1"


def test_log_query_full_fields(tmp_path):
    """All fields are recorded when provided."""
    with patch("mysql_mcp.querylog._LOG_ROOT", tmp_path):
        log_query(
            tool="mysql_query",
            sql="DROP TABLE users",
            database="shop",
            kind="drop",
            permitted=False,
            reason="DROP operations are not allowed",
            code="M0101",
            tables=["users"],
            duration_ms=450.0,
            error=None,
        )

    line = list((tmp_path / "shop").glob("*.jsonl"))[0].read_text().strip()
    entry = json.loads(line)
    assert entry["permitted"] is False
    assert entry["reason"] == "DROP operations are not allowed"
    assert entry["code"] == "M0101"
    assert entry["tables"] == ["users"]
    assert entry["duration_ms"] == 450.0
    assert entry["error"] is None


def test_log_query_write_failure_is_not_raised(tmp_path):
    """An unwritable log root is reported, not raised."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with patch("mysql_mcp.querylog._LOG_ROOT", blocker):
        log_query(tool="mysql_query", sql="SELECT 1 LIMIT 1", database="shop")


def test_cleanup_deletes_old_files(tmp_path):
    """Files older than retention_days are deleted."""
    db_dir = tmp_path / "shop"
    db_dir.mkdir(parents=True)

    # Create old file (40 days ago)
    old_date = (datetime.now(UTC) - timedelta(days=40)).strftime("%Y-%m-%d")
    (db_dir / f"{old_date}.jsonl").write_text('{"sql":"old"}\n')

    # Create recent file (5 days ago)
    recent_date = (datetime.now(UTC) - timedelta(days=5)).strftime("%Y-%m-%d")
    (db_dir / f"{recent_date}.jsonl").write_text('{"sql":"recent"}\n')

    # Unrelated files are left alone
    (db_dir / "notes.jsonl").write_text("")

    with patch("mysql_mcp.querylog._LOG_ROOT", tmp_path):
        deleted = cleanup_old_logs("shop", retention_days=30)

    assert deleted == 1
    assert not (db_dir / f"{old_date}.jsonl").exists()
    assert (db_dir / f"{recent_date}.jsonl").exists()
    assert (db_dir / "notes.jsonl").exists()


def test_cleanup_removes_empty_directory(tmp_path):
    db_dir = tmp_path / "shop"
    db_dir.mkdir(parents=True)
    old_date = (datetime.now(UTC) - timedelta(days=40)).strftime("%Y-%m-%d")
    (db_dir / f"{old_date}.jsonl").write_text("{}\n")

    with patch("mysql_mcp.querylog._LOG_ROOT", tmp_path):
        assert cleanup_old_logs("shop", retention_days=30) == 1
    assert not db_dir.exists()


def test_cleanup_no_directory(tmp_path):
    """Cleanup is a no-op when log directory doesn't exist."""
    with patch("mysql_mcp.querylog._LOG_ROOT", tmp_path):
        deleted = cleanup_old_logs("nonexistent")
    assert deleted == 0
