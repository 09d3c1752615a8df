"""Tool catalog: names, descriptions and JSON-schema input descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field

MYSQL_QUERY = "mysql_query"
MYSQL_DESCRIBE_TABLE = "mysql_describe_table"
MYSQL_LIST_TABLES = "mysql_list_tables"
MYSQL_EXPLAIN = "mysql_explain"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, object] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


TOOL_CATALOG: tuple[ToolSpec, ...] = (
    ToolSpec(
        name=MYSQL_QUERY,
        description="Execute SQL queries on MySQL database (SELECT, INSERT, UPDATE, DELETE)",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "SQL query to execute"},
                "params": {
                    "type": "array",
                    "description": "Parameters for prepared statement (optional)",
                    "items": {"type": "string"},
                },
            },
            "required": ["query"],
        },
    ),
    ToolSpec(
        name=MYSQL_DESCRIBE_TABLE,
        description="Get table structure and schema information",
        input_schema={
            "type": "object",
            "properties": {
                "table": {"type": "string", "description": "Table name to describe"},
            },
            "required": ["table"],
        },
    ),
    ToolSpec(
        name=MYSQL_LIST_TABLES,
        description="List all tables in the database",
    ),
    ToolSpec(
        name=MYSQL_EXPLAIN,
        description="Get query execution plan using EXPLAIN",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Query to analyze with EXPLAIN"},
            },
            "required": ["query"],
        },
    ),
)


def tool_names() -> list[str]:
    return [spec.name for spec in TOOL_CATALOG]
