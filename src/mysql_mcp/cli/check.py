"""The `check` command: evaluate SQL against the policy without executing."""

from __future__ import annotations

import click

from mysql_mcp.cli._output import format_decision
from mysql_mcp.cli._shared import resolve_config
from mysql_mcp.policy import evaluate, evaluate_explain


@click.command()
@click.argument("sql")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
@click.option(
    "--explain", is_flag=True,
    help="Check as a mysql_explain target (row-limit rules skipped).",
)
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False), default=None)
def check(sql: str, output_format: str, explain: bool, env_file: str | None) -> None:
    """Check SQL against the configured policy. Exits 1 when denied."""
    policy = resolve_config(env_file).policy
    decision = evaluate_explain(sql, policy) if explain else evaluate(sql, policy)
    click.echo(format_decision(sql, decision, policy, output_format=output_format))
    if not decision.permit:
        raise SystemExit(1)
