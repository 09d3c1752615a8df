"""Dangerous-operation rules: capability gating and unconditional blocks."""

from __future__ import annotations

from mysql_mcp.policy import codes
from mysql_mcp.policy._types import OperationKind, StatementVerdict
from mysql_mcp.policy.capabilities import CapabilityPolicy
from mysql_mcp.policy.classify import classify, normalize, statement_count, system_hazards

# DDL kind → (capability property, reason code)
_DDL_GATES: dict[OperationKind, tuple[str, codes.ReasonCode]] = {
    OperationKind.DROP: ("drop_allowed", codes.DROP_BLOCKED),
    OperationKind.CREATE: ("create_allowed", codes.CREATE_BLOCKED),
    OperationKind.ALTER: ("alter_allowed", codes.ALTER_BLOCKED),
    OperationKind.TRUNCATE: ("truncate_allowed", codes.TRUNCATE_BLOCKED),
}


def _deny(kind: OperationKind, code: codes.ReasonCode, reason: str) -> StatementVerdict:
    return StatementVerdict(kind=kind, is_dangerous=True, reason=reason, code=code)


def _has_where(sql: str) -> bool:
    return "WHERE " in normalize(sql) + " "


def check_multiple_statements(sql: str) -> StatementVerdict | None:
    """Block SQL containing more than one statement (possible injection)."""
    if statement_count(sql) <= 1:
        return None
    return _deny(classify(sql), codes.MULTIPLE_STATEMENTS, "Multiple statements are not allowed")


def check_statement(sql: str, policy: CapabilityPolicy) -> StatementVerdict:
    """Apply the dangerous-operation rules in order; the first failing rule wins.

    1. DROP/CREATE/ALTER/TRUNCATE without the matching capability
    2. INSERT without ALLOW_INSERT
    3. DELETE without ALLOW_DELETE (and, if required, without WHERE)
    4. UPDATE without ALLOW_UPDATE, or without WHERE regardless of flags
    5. System commands anywhere in the text (never allowed)
    6. GRANT/REVOKE (never allowed)
    """
    kind = classify(sql)

    gate = _DDL_GATES.get(kind)
    if gate is not None:
        allowed_attr, code = gate
        if not getattr(policy, allowed_attr):
            return _deny(kind, code, f"{kind.name} operations are not allowed")

    if kind == OperationKind.INSERT and not policy.insert_allowed:
        return _deny(
            kind, codes.INSERT_BLOCKED,
            "INSERT operations are not allowed (ALLOW_INSERT=false)",
        )

    if kind == OperationKind.DELETE:
        if not policy.delete_allowed:
            return _deny(
                kind, codes.DELETE_BLOCKED,
                "DELETE operations are not allowed (ALLOW_DELETE=false)",
            )
        if policy.require_delete_where and not _has_where(sql):
            return _deny(
                kind, codes.DELETE_WITHOUT_WHERE,
                "DELETE without WHERE clause is not allowed",
            )

    if kind == OperationKind.UPDATE:
        if not policy.update_allowed:
            return _deny(
                kind, codes.UPDATE_BLOCKED,
                "UPDATE operations are not allowed (ALLOW_UPDATE=false)",
            )
        if not _has_where(sql):
            return _deny(
                kind, codes.UPDATE_WITHOUT_WHERE,
                "UPDATE without WHERE clause is not allowed",
            )

    if system_hazards(sql):
        return _deny(kind, codes.SYSTEM_BLOCKED, "System operations are not allowed")

    if kind in (OperationKind.GRANT, OperationKind.REVOKE):
        return _deny(kind, codes.PRIVILEGE_BLOCKED, "Privilege operations are not allowed")

    return StatementVerdict(kind=kind, is_dangerous=False)
