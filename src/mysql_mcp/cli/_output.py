"""Shared output formatting for CLI commands."""

from __future__ import annotations

import json

from mysql_mcp.policy import CapabilityPolicy, PolicyDecision


def render_json(sql: str, decision: PolicyDecision, policy: CapabilityPolicy) -> dict:
    return {
        "sql": sql,
        "decision": decision.decision,
        "kind": decision.kind.value,
        "code": str(decision.code) if decision.code else None,
        "reason": decision.reason or None,
        "policy": policy.summary(),
    }


def render_text(decision: PolicyDecision) -> str:
    if decision.permit:
        return f"allow: {decision.kind.value} statement permitted"
    return f"deny[{decision.code}]: {decision.reason}"


def format_decision(
    sql: str,
    decision: PolicyDecision,
    policy: CapabilityPolicy,
    *,
    output_format: str = "text",
) -> str:
    if output_format == "json":
        return json.dumps(render_json(sql, decision, policy), indent=2)
    return render_text(decision)
