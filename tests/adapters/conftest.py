"""Adapter test fixtures."""

from __future__ import annotations

import os

import pytest

from mysql_mcp.adapters._base import ConnectionConfig


@pytest.fixture(scope="session")
def mysql_config() -> ConnectionConfig:
    return ConnectionConfig(
        host=os.environ.get("MYSQL_MCP_TEST_HOST", "127.0.0.1"),
        port=int(os.environ.get("MYSQL_MCP_TEST_PORT", "3306")),
        user=os.environ.get("MYSQL_MCP_TEST_USER", "root"),
        password=os.environ.get("MYSQL_MCP_TEST_PASSWORD", "mysql_test"),
        database=os.environ.get("MYSQL_MCP_TEST_DATABASE", "mysql_mcp_test"),
        pool_size=2,
        query_timeout=5.0,
    )
