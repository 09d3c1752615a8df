"""CLI entry point. ``mysql-mcp`` resolves here."""

from __future__ import annotations

import click

from mysql_mcp.cli.check import check
from mysql_mcp.cli.serve import serve
from mysql_mcp.cli.tools import tools


@click.group()
@click.version_option(package_name="mysql-mcp")
def main() -> None:
    """mysql-mcp: policy-guarded MySQL tools over MCP."""


main.add_command(serve)
main.add_command(check)
main.add_command(tools)
