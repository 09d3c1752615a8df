"""Classify SQL statements by lexical shape.

This is a heuristic layer, not a parser. Statement type comes from the
leading keyword, or for a CTE from the statement after the CTE list. System
hazards are found anywhere in the text because they can be smuggled in as a
second statement or a trailing clause. Comment and quoting tricks can still
evade it. Batches are caught separately by ``statement_count``.
"""

from __future__ import annotations

import re

import sqlglot
from sqlglot.tokens import Token, TokenType

from mysql_mcp.policy._types import OperationKind

_PREFIXES: tuple[tuple[str, OperationKind], ...] = (
    ("DROP ", OperationKind.DROP),
    ("CREATE ", OperationKind.CREATE),
    ("ALTER ", OperationKind.ALTER),
    ("TRUNCATE ", OperationKind.TRUNCATE),
    ("INSERT ", OperationKind.INSERT),
    ("DELETE ", OperationKind.DELETE),
    ("UPDATE ", OperationKind.UPDATE),
    ("GRANT ", OperationKind.GRANT),
    ("REVOKE ", OperationKind.REVOKE),
    ("SELECT ", OperationKind.SELECT),
)

SYSTEM_HAZARDS: tuple[str, ...] = ("SHUTDOWN", "KILL ", "STOP SLAVE", "RESET MASTER")

# Statement keywords that may follow a CTE list
_CTE_BODIES: dict[TokenType, OperationKind] = {
    TokenType.SELECT: OperationKind.SELECT,
    TokenType.UPDATE: OperationKind.UPDATE,
    TokenType.DELETE: OperationKind.DELETE,
}

_EXPLAIN_MODIFIERS = re.compile(r"^\s*(?:ANALYZE\s+)?(?:FORMAT\s*=\s*\w+\s+)?", re.IGNORECASE)


def normalize(sql: str) -> str:
    """Uppercase and collapse whitespace. Used for matching only, never executed."""
    return " ".join(sql.split()).upper()


def classify(sql: str) -> OperationKind:
    """Return the operation kind implied by the statement's leading keyword."""
    text = normalize(sql) + " "
    if text.startswith("WITH "):
        return _cte_body_kind(sql)
    for prefix, kind in _PREFIXES:
        if text.startswith(prefix):
            return kind
    return OperationKind.OTHER


def _tokenize(sql: str) -> list[Token] | None:
    try:
        return sqlglot.tokenize(sql, read="mysql")
    except sqlglot.errors.TokenError:
        return None


def _cte_body_kind(sql: str) -> OperationKind:
    """Kind of the statement that follows a ``WITH ...`` CTE list.

    The first SELECT, UPDATE or DELETE outside all parentheses decides.
    Anything unresolvable counts as SELECT.
    """
    depth = 0
    for token in _tokenize(sql) or []:
        if token.token_type == TokenType.L_PAREN:
            depth += 1
        elif token.token_type == TokenType.R_PAREN:
            depth -= 1
        elif depth == 0 and token.token_type in _CTE_BODIES:
            return _CTE_BODIES[token.token_type]
    return OperationKind.SELECT


def statement_count(sql: str) -> int:
    """Number of non-empty statements separated by top-level semicolons.

    Semicolons inside string literals, quoted identifiers and comments do not
    separate statements. Text that cannot be tokenized (an unterminated quote
    or comment) is split on every semicolon instead.
    """
    tokens = _tokenize(sql)
    if tokens is None:
        return len([part for part in sql.split(";") if part.strip()])

    count = 0
    pending = False
    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            if pending:
                count += 1
            pending = False
        else:
            pending = True
    return count + 1 if pending else count


def system_hazards(sql: str) -> list[str]:
    """Return every system-command marker contained anywhere in the statement."""
    text = normalize(sql) + " "
    return [marker.strip() for marker in SYSTEM_HAZARDS if marker in text]


def explain_target(sql: str) -> str:
    """Strip EXPLAIN modifiers (ANALYZE, FORMAT=...) that precede the explained statement.

    ``EXPLAIN ANALYZE`` runs the statement, so the statement itself is what
    the policy must see.
    """
    return _EXPLAIN_MODIFIERS.sub("", sql, count=1)
