"""Database adapter protocol — the abstraction boundary between tools and drivers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from sqlglot import exp


@dataclass(frozen=True)
class ConnectionConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = ""
    password: str = field(default="", repr=False)
    database: str = ""
    pool_size: int = 5
    query_timeout: float | None = 30.0

    @property
    def is_complete(self) -> bool:
        """User, password and database are all required to attempt a connection."""
        return bool(self.user and self.password and self.database)

    def missing(self) -> list[str]:
        names = {"DB_USER": self.user, "DB_PASSWORD": self.password, "DB_NAME": self.database}
        return [name for name, value in names.items() if not value]


@dataclass
class ExecutionResult:
    """Statement execution result.

    Row-returning statements fill ``columns`` and ``rows``; other statements
    report ``affected_rows`` and ``last_insert_id``.
    """

    columns: list[str]
    rows: list[dict[str, object]]
    row_count: int
    affected_rows: int | None = None
    last_insert_id: int | None = None
    duration_ms: float | None = None

    @property
    def returns_rows(self) -> bool:
        return bool(self.columns)

    def payload(self) -> object:
        """JSON-ready body: the rows, or a write summary."""
        if self.returns_rows:
            return self.rows
        return {"affected_rows": self.affected_rows, "last_insert_id": self.last_insert_id}


class AdapterError(Exception):
    """Raised by adapters for connection/execution failures."""


class QueryTimeout(AdapterError):
    """A statement exceeded the configured per-query timeout. Safe to retry."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Query timed out after {timeout:g}s; the query may be retried")
        self.timeout = timeout


def quote_table(name: str, *, dialect: str = "mysql") -> str:
    """Quote a ``table`` or ``schema.table`` reference as dialect identifiers.

    The name is never parsed as SQL: each dotted part becomes a quoted
    identifier, so a hostile name stays inside the identifier position.
    """
    name = name.strip()
    if not name:
        raise ValueError("table name must not be empty")
    db, sep, table = name.rpartition(".")
    if not table or (sep and not db):
        raise ValueError(f"invalid table reference: {name!r}")
    return exp.table_(table, db=db or None, quoted=True).sql(dialect=dialect)


@runtime_checkable
class DatabaseAdapter(Protocol):
    async def connect(self, config: ConnectionConfig) -> None: ...
    async def close(self) -> None: ...
    async def execute(
        self, sql: str, params: Sequence[object] | None = None
    ) -> ExecutionResult: ...
    def dialect(self) -> str: ...
