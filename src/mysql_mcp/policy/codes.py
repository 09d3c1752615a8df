"""Stable, searchable reason code registry.

Ranges:
- M01xx      — Schema-changing statements (DDL)
- M02xx      — Data-changing statements (DML)
- M03xx      — Always-blocked statements (system, privilege, batches)
- M04xx      — Row limits
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReasonCode:
    value: int

    def __str__(self) -> str:
        return f"M{self.value:04d}"


# DDL (M01xx)
DROP_BLOCKED = ReasonCode(101)
CREATE_BLOCKED = ReasonCode(102)
ALTER_BLOCKED = ReasonCode(103)
TRUNCATE_BLOCKED = ReasonCode(104)

# DML (M02xx)
INSERT_BLOCKED = ReasonCode(201)
DELETE_BLOCKED = ReasonCode(202)
UPDATE_BLOCKED = ReasonCode(203)
UPDATE_WITHOUT_WHERE = ReasonCode(204)
DELETE_WITHOUT_WHERE = ReasonCode(205)

# Always blocked (M03xx)
SYSTEM_BLOCKED = ReasonCode(301)
PRIVILEGE_BLOCKED = ReasonCode(302)
MULTIPLE_STATEMENTS = ReasonCode(303)

# Row limits (M04xx)
LIMIT_REQUIRED = ReasonCode(401)
LIMIT_EXCEEDED = ReasonCode(402)
