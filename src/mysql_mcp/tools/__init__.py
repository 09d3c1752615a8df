"""MCP tools: catalog and policy-enforcing dispatcher."""

from mysql_mcp.tools.catalog import TOOL_CATALOG, ToolSpec, tool_names
from mysql_mcp.tools.dispatch import (
    CONFIG_ERROR_MESSAGE,
    TextContent,
    ToolArgumentError,
    ToolDispatcher,
    ToolResult,
)

__all__ = [
    "CONFIG_ERROR_MESSAGE",
    "TOOL_CATALOG",
    "TextContent",
    "ToolArgumentError",
    "ToolDispatcher",
    "ToolResult",
    "ToolSpec",
    "tool_names",
]
