"""MCP server wiring: tool catalog, call routing, connection lifecycle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from collections.abc import Sequence
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from mysql_mcp import __version__
from mysql_mcp.adapters._base import AdapterError, DatabaseAdapter
from mysql_mcp.adapters.mysql import MySQLAdapter
from mysql_mcp.config import ServerConfig
from mysql_mcp.querylog import cleanup_old_logs
from mysql_mcp.tools.catalog import TOOL_CATALOG
from mysql_mcp.tools.dispatch import ToolDispatcher

SERVER_NAME = "mysql-mcp-server"

logger = logging.getLogger(__name__)


def tool_definitions() -> list[types.Tool]:
    return [
        types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
        for spec in TOOL_CATALOG
    ]


def build_server(dispatcher: ToolDispatcher) -> Server:
    """Create an MCP server whose tool calls all go through ``dispatcher``."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()  # type: ignore[no-untyped-call,untyped-decorator]
    async def list_tools() -> list[types.Tool]:
        return tool_definitions()

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> Sequence[types.TextContent]:
        result = await dispatcher.dispatch(name, arguments or {})
        return [types.TextContent(type=block.type, text=block.text) for block in result.content]

    return server


async def open_adapter(config: ServerConfig) -> DatabaseAdapter | None:
    """Connect to MySQL, or return None (demo mode) when that is not possible."""
    db = config.database
    if not db.is_complete:
        logger.warning(
            "Database configuration is incomplete (missing %s). Running in demo mode.",
            ", ".join(db.missing()),
        )
        return None

    adapter = MySQLAdapter()
    try:
        await adapter.connect(db)
    except AdapterError as e:
        logger.error("Failed to connect to database: %s", e)
        logger.warning("Running in demo mode without database connection")
        return None
    return adapter


def _install_signal_handlers(task: asyncio.Task) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops; KeyboardInterrupt still applies there.
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, task.cancel)


async def serve(config: ServerConfig) -> None:
    """Run the stdio MCP server until EOF or SIGINT/SIGTERM.

    The connection pool is closed on every exit path; in-flight queries are
    aborted rather than drained.
    """
    for key, value in config.describe().items():
        logger.info("%s: %s", key, value)
    logger.info("Policy: %s", config.policy.summary())

    if config.query_log:
        deleted = cleanup_old_logs(
            config.database.database, retention_days=config.query_log_retention_days,
        )
        if deleted:
            logger.info("Removed %d expired query log files", deleted)

    adapter = await open_adapter(config)
    dispatcher = ToolDispatcher(
        adapter,
        config.policy,
        query_log=config.query_log,
        database=config.database.database or None,
    )
    server = build_server(dispatcher)

    task = asyncio.current_task()
    if task is not None:
        _install_signal_handlers(task)

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MySQL MCP Server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    except asyncio.CancelledError:
        logger.info("Shutdown signal received")
    finally:
        if adapter is not None:
            await adapter.close()
