"""Root conftest — shared fixtures and markers."""

from __future__ import annotations

import os

import pytest

from mysql_mcp.adapters._base import ConnectionConfig, ExecutionResult
from mysql_mcp.policy import CapabilityPolicy
from mysql_mcp.tools.dispatch import ToolDispatcher


def pytest_configure(config):
    config.addinivalue_line("markers", "mysql: requires running MySQL server")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("MYSQL_MCP_TEST_MYSQL"):
        return

    skip_mysql = pytest.mark.skip(reason="MySQL not available (set MYSQL_MCP_TEST_MYSQL=1)")
    for item in items:
        if "mysql" in item.keywords:
            item.add_marker(skip_mysql)


class FakeAdapter:
    """In-memory DatabaseAdapter: records every statement, returns canned rows."""

    def __init__(
        self,
        rows: list[dict[str, object]] | None = None,
        *,
        error: Exception | None = None,
        affected_rows: int = 1,
    ) -> None:
        self.rows = [{"id": 1, "name": "alice"}] if rows is None else rows
        self.error = error
        self.affected_rows = affected_rows
        self.calls: list[tuple[str, list[object]]] = []
        self.closed = False

    async def connect(self, config: ConnectionConfig) -> None:
        return None

    async def close(self) -> None:
        self.closed = True

    async def execute(self, sql, params=None) -> ExecutionResult:
        self.calls.append((sql, list(params) if params else []))
        if self.error is not None:
            raise self.error
        if not self.rows:
            return ExecutionResult(
                columns=[], rows=[], row_count=0,
                affected_rows=self.affected_rows, last_insert_id=None, duration_ms=1.0,
            )
        return ExecutionResult(
            columns=list(self.rows[0]),
            rows=self.rows,
            row_count=len(self.rows),
            duration_ms=1.0,
        )

    def dialect(self) -> str:
        return "mysql"

    @property
    def executed(self) -> list[str]:
        return [sql for sql, _ in self.calls]


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def make_adapter():
    """Factory for FakeAdapters with custom rows or errors."""
    return FakeAdapter


@pytest.fixture
def make_dispatcher(fake_adapter):
    """Build a ToolDispatcher over ``fake_adapter`` with policy overrides."""

    def _make(adapter: object = fake_adapter, **policy_flags: object) -> ToolDispatcher:
        return ToolDispatcher(adapter, CapabilityPolicy(**policy_flags))

    return _make
