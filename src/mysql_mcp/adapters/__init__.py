"""Database adapters — implementations of the DatabaseAdapter protocol."""

from mysql_mcp.adapters._base import (
    AdapterError,
    ConnectionConfig,
    DatabaseAdapter,
    ExecutionResult,
    QueryTimeout,
    quote_table,
)

__all__ = [
    "AdapterError",
    "ConnectionConfig",
    "DatabaseAdapter",
    "ExecutionResult",
    "QueryTimeout",
    "quote_table",
]
