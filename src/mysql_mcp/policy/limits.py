"""Row-limit rules: every SELECT must carry a LIMIT no larger than max_rows."""

from __future__ import annotations

import re

from mysql_mcp.policy import codes
from mysql_mcp.policy._types import LimitVerdict
from mysql_mcp.policy.capabilities import CapabilityPolicy
from mysql_mcp.policy.classify import normalize

# LIMIT n | LIMIT offset, n  (MySQL). Placeholders (LIMIT ?) do not match.
_LIMIT_RE = re.compile(r"\bLIMIT (\d+)(?: ?, ?(\d+))?")


def limit_values(sql: str) -> list[int]:
    """Row counts of every numeric LIMIT clause, in textual order."""
    values: list[int] = []
    for match in _LIMIT_RE.finditer(normalize(sql)):
        offset_or_count, count = match.groups()
        values.append(int(count if count is not None else offset_or_count))
    return values


def check_limits(sql: str, policy: CapabilityPolicy) -> LimitVerdict:
    """Require LIMIT on SELECTs and cap every LIMIT value at ``policy.max_rows``."""
    text = normalize(sql) + " "

    if "SELECT " in text and "LIMIT " not in text:
        return LimitVerdict(
            is_valid=False,
            reason="SELECT queries must include LIMIT clause",
            code=codes.LIMIT_REQUIRED,
        )

    for value in limit_values(sql):
        if value > policy.max_rows:
            return LimitVerdict(
                is_valid=False,
                reason=f"LIMIT value exceeds maximum allowed ({policy.max_rows})",
                code=codes.LIMIT_EXCEEDED,
            )

    return LimitVerdict(is_valid=True)
