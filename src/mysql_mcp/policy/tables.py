"""CTE-aware table extraction using sqlglot scope analysis.

Used for the query log only; policy decisions never depend on it.
"""

from __future__ import annotations

import sqlglot
from sqlglot import exp
from sqlglot.optimizer.scope import traverse_scope


def extract_tables(sql: str, *, dialect: str = "mysql") -> list[str]:
    """Return sorted physical table names referenced by ``sql``.

    Resolves CTEs, so only real tables are returned (``schema.table`` when a
    schema is present). Returns an empty list when the SQL does not parse.
    """
    try:
        statement = sqlglot.parse_one(sql, dialect=dialect)
    except sqlglot.errors.SqlglotError:
        return []
    if statement is None:
        return []

    cte_names: set[str] = set()
    source_tables: set[str] = set()

    try:
        scopes = list(traverse_scope(statement))
    except Exception:
        # DDL and other statements without scopes
        return _walk_tables(statement)

    if not scopes:
        return _walk_tables(statement)

    for scope in scopes:
        if scope.is_cte:
            cte_names.add(scope.expression.parent.alias)

    for scope in scopes:
        for table in scope.tables:
            if table.name not in cte_names:
                source_tables.add(_qualified_name(table))

    # DML targets (INSERT INTO, DELETE FROM, UPDATE) aren't in scopes
    for node in (statement.find(t) for t in (exp.Insert, exp.Delete, exp.Update)):
        if node is not None:
            table = node.find(exp.Table)
            if table is not None and table.name not in cte_names:
                source_tables.add(_qualified_name(table))

    return sorted(source_tables)


def _walk_tables(statement: exp.Expression) -> list[str]:
    tables: set[str] = set()
    for node in statement.walk():
        if isinstance(node, exp.Table) and node.name:
            tables.add(_qualified_name(node))
    return sorted(tables)


def _qualified_name(table: exp.Table) -> str:
    if table.db:
        return f"{table.db}.{table.name}"
    return table.name
