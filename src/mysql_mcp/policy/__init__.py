"""Policy engine: classify, guard, limit, return a decision."""

from __future__ import annotations

from mysql_mcp.policy._types import (
    LimitVerdict,
    OperationKind,
    PolicyDecision,
    StatementVerdict,
)
from mysql_mcp.policy.capabilities import CapabilityPolicy
from mysql_mcp.policy.classify import classify, explain_target, normalize, system_hazards
from mysql_mcp.policy.limits import check_limits
from mysql_mcp.policy.safety import check_multiple_statements, check_statement

__all__ = [
    "CapabilityPolicy",
    "LimitVerdict",
    "OperationKind",
    "PolicyDecision",
    "StatementVerdict",
    "check_limits",
    "check_multiple_statements",
    "check_statement",
    "classify",
    "evaluate",
    "evaluate_explain",
    "explain_target",
    "normalize",
    "system_hazards",
]


def evaluate(sql: str, policy: CapabilityPolicy, *, check_rows: bool = True) -> PolicyDecision:
    """Run the full policy pipeline on a SQL string.

    Steps:
        1. Dangerous-operation rules (capability gates, WHERE floors,
           system and privilege blocks)
        2. Single statement only (batches are refused)
        3. Row-limit rules (LIMIT required on SELECT, capped at max_rows)

    All must pass. The function is pure: the same input always yields the
    same decision.

    Args:
        sql: The raw SQL string from the caller.
        policy: The capability policy to enforce.
        check_rows: Apply the row-limit rules. Disabled for EXPLAIN, which
            returns a plan rather than rows.
    """
    danger = check_statement(sql, policy)
    if danger.is_dangerous:
        return PolicyDecision(
            permit=False, kind=danger.kind, reason=danger.reason, code=danger.code,
        )

    batch = check_multiple_statements(sql)
    if batch is not None:
        return PolicyDecision(
            permit=False, kind=batch.kind, reason=batch.reason, code=batch.code,
        )

    if check_rows:
        limits = check_limits(sql, policy)
        if not limits.is_valid:
            return PolicyDecision(
                permit=False, kind=danger.kind, reason=limits.reason, code=limits.code,
            )

    return PolicyDecision(permit=True, kind=danger.kind)


def evaluate_explain(sql: str, policy: CapabilityPolicy) -> PolicyDecision:
    """Decide whether ``EXPLAIN <sql>`` may run.

    The explained statement gets the dangerous-operation and single-statement
    rules; row limits are skipped because EXPLAIN returns a plan, not rows.
    """
    return evaluate(explain_target(sql), policy, check_rows=False)
