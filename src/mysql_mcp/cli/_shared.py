"""Shared helpers for CLI commands."""

from __future__ import annotations

import logging
import sys

import click

from mysql_mcp.config import ConfigError, ServerConfig, load_config


def resolve_config(env_file: str | None) -> ServerConfig:
    """Load configuration or exit with a readable error."""
    try:
        return load_config(env_file=env_file)
    except ConfigError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from e


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the MCP stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
