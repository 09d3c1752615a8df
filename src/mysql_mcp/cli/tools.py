"""The `tools` command: print the tool catalog."""

from __future__ import annotations

import json

import click

from mysql_mcp.tools.catalog import TOOL_CATALOG


@click.command()
def tools() -> None:
    """Print the tool catalog as JSON."""
    click.echo(json.dumps([spec.as_dict() for spec in TOOL_CATALOG], indent=2))
