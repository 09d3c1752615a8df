"""Tool dispatcher: resolve handler → enforce policy → execute → render text.

``ToolDispatcher.dispatch`` never raises. Policy denials, bad arguments and
database failures all come back as a single text block so the transport
never sees an unhandled fault.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field

from mysql_mcp.adapters._base import (
    AdapterError,
    DatabaseAdapter,
    ExecutionResult,
    quote_table,
)
from mysql_mcp.policy import CapabilityPolicy, PolicyDecision, evaluate, evaluate_explain
from mysql_mcp.policy.tables import extract_tables
from mysql_mcp.querylog import log_query
from mysql_mcp.tools import catalog

logger = logging.getLogger(__name__)

CONFIG_ERROR_MESSAGE = (
    "Error: Database connection not established. "
    "Please configure DB_USER, DB_PASSWORD, and DB_NAME environment variables."
)


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolResult:
    content: list[TextContent] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)


class ToolArgumentError(ValueError):
    """A tool was called with missing or malformed arguments."""


Handler = Callable[[dict[str, object]], Awaitable[str]]


def _dump(payload: object) -> str:
    return json.dumps(payload, indent=2, default=str)


def _require_str(args: Mapping[str, object], name: str) -> str:
    value = args.get(name)
    if value is None:
        raise ToolArgumentError(f"Missing required argument: {name}")
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument '{name}' must be a string")
    if not value.strip():
        raise ToolArgumentError(f"Argument '{name}' must not be empty")
    return value


def _optional_params(args: Mapping[str, object]) -> list[object]:
    params = args.get("params")
    if params is None:
        return []
    if isinstance(params, (str, bytes)) or not isinstance(params, Sequence):
        raise ToolArgumentError("Argument 'params' must be an array")
    for value in params:
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise ToolArgumentError("Argument 'params' must contain only scalar values")
    return list(params)


class ToolDispatcher:
    """Routes tool calls to handlers, enforcing the capability policy first.

    ``adapter`` is None in demo mode: every call then returns
    ``CONFIG_ERROR_MESSAGE`` without resolving a handler.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter | None,
        policy: CapabilityPolicy,
        *,
        query_log: bool = False,
        database: str | None = None,
    ) -> None:
        self._adapter = adapter
        self._policy = policy
        self._query_log = query_log
        self._database = database
        self._handlers: dict[str, Handler] = {
            catalog.MYSQL_QUERY: self._mysql_query,
            catalog.MYSQL_DESCRIBE_TABLE: self._mysql_describe_table,
            catalog.MYSQL_LIST_TABLES: self._mysql_list_tables,
            catalog.MYSQL_EXPLAIN: self._mysql_explain,
        }

    @property
    def demo_mode(self) -> bool:
        return self._adapter is None

    @property
    def policy(self) -> CapabilityPolicy:
        return self._policy

    async def dispatch(
        self, name: str, arguments: Mapping[str, object] | None = None
    ) -> ToolResult:
        if self._adapter is None:
            return ToolResult.from_text(CONFIG_ERROR_MESSAGE)

        handler = self._handlers.get(name)
        if handler is None:
            return ToolResult.from_text(f"Unknown tool: {name}")

        try:
            text = await handler(dict(arguments or {}))
        except (ToolArgumentError, AdapterError) as e:
            text = f"Error: {e}"
        except Exception as e:
            logger.exception("Tool %s failed unexpectedly", name)
            text = f"Error: {e}"
        return ToolResult.from_text(text)

    # -- Handlers ---------------------------------------------------------------

    async def _mysql_query(self, args: dict[str, object]) -> str:
        query = _require_str(args, "query")
        params = _optional_params(args)

        decision = evaluate(query, self._policy)
        if not decision.permit:
            self._deny(catalog.MYSQL_QUERY, query, decision)
            return f"Security Error: {decision.reason}"

        result = await self._execute(catalog.MYSQL_QUERY, query, params, decision)
        return f"Query executed successfully:\n{_dump(result.payload())}"

    async def _mysql_describe_table(self, args: dict[str, object]) -> str:
        table = _require_str(args, "table")
        try:
            quoted = quote_table(table, dialect=self._require_adapter().dialect())
        except ValueError as e:
            raise ToolArgumentError(str(e)) from e

        result = await self._require_adapter().execute(f"DESCRIBE {quoted}")
        return f"Table structure for {table}:\n{_dump(result.rows)}"

    async def _mysql_list_tables(self, args: dict[str, object]) -> str:
        result = await self._require_adapter().execute("SHOW TABLES")
        return f"Tables in database:\n{_dump(result.rows)}"

    async def _mysql_explain(self, args: dict[str, object]) -> str:
        query = _require_str(args, "query")

        decision = None
        if self._policy.enforce_explain:
            decision = evaluate_explain(query, self._policy)
            if not decision.permit:
                self._deny(catalog.MYSQL_EXPLAIN, query, decision)
                return f"Security Error: {decision.reason}"

        result = await self._execute(catalog.MYSQL_EXPLAIN, f"EXPLAIN {query}", [], decision)
        return f"Query execution plan:\n{_dump(result.rows)}"

    # -- Helpers ----------------------------------------------------------------

    def _require_adapter(self) -> DatabaseAdapter:
        if self._adapter is None:
            raise AdapterError("Database connection not established")
        return self._adapter

    async def _execute(
        self,
        tool: str,
        sql: str,
        params: list[object],
        decision: PolicyDecision | None,
    ) -> ExecutionResult:
        adapter = self._require_adapter()
        t0 = time.monotonic()
        try:
            result = await adapter.execute(sql, params)
        except AdapterError as e:
            logger.warning("%s failed: %s", tool, e)
            self._record(tool, sql, decision, error=str(e), duration_ms=_elapsed(t0))
            raise
        self._record(tool, sql, decision, duration_ms=result.duration_ms or _elapsed(t0))
        return result

    def _deny(self, tool: str, sql: str, decision: PolicyDecision) -> None:
        logger.info(
            "Blocked %s statement via %s [%s]: %s",
            decision.kind.value, tool, decision.code, decision.reason,
        )
        self._record(tool, sql, decision)

    def _record(
        self,
        tool: str,
        sql: str,
        decision: PolicyDecision | None,
        *,
        error: str | None = None,
        duration_ms: float | None = None,
    ) -> None:
        if not self._query_log:
            return
        try:
            log_query(
                tool=tool,
                sql=sql,
                database=self._database,
                kind=decision.kind.value if decision else None,
                permitted=decision.permit if decision else True,
                reason=decision.reason if decision else None,
                code=str(decision.code) if decision and decision.code else None,
                tables=extract_tables(sql),
                duration_ms=duration_ms,
                error=error,
            )
        except Exception:
            logger.exception("Could not record %s call in the query log", tool)


def _elapsed(t0: float) -> float:
    return (time.monotonic() - t0) * 1000
