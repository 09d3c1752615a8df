"""Internal types for the policy engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from mysql_mcp.policy.codes import ReasonCode


class OperationKind(enum.Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    DROP = "drop"
    CREATE = "create"
    ALTER = "alter"
    TRUNCATE = "truncate"
    GRANT = "grant"
    REVOKE = "revoke"
    OTHER = "other"  # Unrecognized shape → allowed unless a hazard matches


@dataclass(frozen=True)
class StatementVerdict:
    kind: OperationKind
    is_dangerous: bool
    reason: str = ""
    code: ReasonCode | None = None


@dataclass(frozen=True)
class LimitVerdict:
    is_valid: bool
    reason: str = ""
    code: ReasonCode | None = None


@dataclass(frozen=True)
class PolicyDecision:
    permit: bool
    kind: OperationKind
    reason: str = ""
    code: ReasonCode | None = None

    @property
    def decision(self) -> str:
        return "allow" if self.permit else "deny"
