"""Capability policy: which statement classes a server instance may run."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_ROWS = 1000


@dataclass(frozen=True)
class CapabilityPolicy:
    """Immutable capability flags and limits, built once at startup.

    ``allow_ddl`` and ``allow_dml`` are umbrella flags: ``allow_ddl`` grants
    DROP, CREATE, ALTER and TRUNCATE; ``allow_dml`` grants INSERT, UPDATE and
    DELETE. The per-operation flags grant a single class.
    """

    allow_ddl: bool = False
    allow_dml: bool = False
    allow_drop: bool = False
    allow_create: bool = False
    allow_alter: bool = False
    allow_insert: bool = False
    allow_update: bool = False
    allow_delete: bool = False
    allow_truncate: bool = False
    max_rows: int = DEFAULT_MAX_ROWS
    require_delete_where: bool = False
    enforce_explain: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_rows, bool) or not isinstance(self.max_rows, int):
            raise TypeError(f"max_rows must be an int, got {type(self.max_rows).__name__}")
        if self.max_rows <= 0:
            raise ValueError(f"max_rows must be positive, got {self.max_rows}")

    # -- Effective grants ------------------------------------------------------

    @property
    def drop_allowed(self) -> bool:
        return self.allow_drop or self.allow_ddl

    @property
    def create_allowed(self) -> bool:
        return self.allow_create or self.allow_ddl

    @property
    def alter_allowed(self) -> bool:
        return self.allow_alter or self.allow_ddl

    @property
    def truncate_allowed(self) -> bool:
        return self.allow_truncate or self.allow_ddl

    @property
    def insert_allowed(self) -> bool:
        return self.allow_insert or self.allow_dml

    @property
    def update_allowed(self) -> bool:
        return self.allow_update or self.allow_dml

    @property
    def delete_allowed(self) -> bool:
        return self.allow_delete or self.allow_dml

    def summary(self) -> dict[str, object]:
        """Effective grants, for startup logging and ``check --format json``."""
        return {
            "drop": self.drop_allowed,
            "create": self.create_allowed,
            "alter": self.alter_allowed,
            "truncate": self.truncate_allowed,
            "insert": self.insert_allowed,
            "update": self.update_allowed,
            "delete": self.delete_allowed,
            "max_rows": self.max_rows,
            "require_delete_where": self.require_delete_where,
            "enforce_explain": self.enforce_explain,
        }
