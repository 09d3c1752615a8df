"""The `serve` command: run the MCP server on stdio."""

from __future__ import annotations

import asyncio

import click

from mysql_mcp.cli._shared import configure_logging, resolve_config
from mysql_mcp.server import serve as run_server


@click.command()
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Load settings from this .env file (default: ./.env if present).",
)
def serve(env_file: str | None) -> None:
    """Serve the MySQL tools over MCP stdio.

    Connection and policy settings come from DB_* and ALLOW_* environment
    variables. Without complete credentials the server starts in demo mode.
    """
    config = resolve_config(env_file)
    configure_logging(config.log_level)
    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass
