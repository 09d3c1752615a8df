"""MySQL adapter — pooled async access via aiomysql, per-query timeouts."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

import aiomysql
import pymysql

from mysql_mcp.adapters._base import (
    AdapterError,
    ConnectionConfig,
    ExecutionResult,
    QueryTimeout,
)
from mysql_mcp.adapters.params import translate_qmark_params

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Human-readable message for a driver error, without the errno tuple."""
    if isinstance(error, pymysql.err.MySQLError) and len(error.args) >= 2:
        return str(error.args[1])
    return str(error) or type(error).__name__


class MySQLAdapter:
    """MySQL adapter over an aiomysql connection pool.

    The pool serializes nothing itself: each statement acquires its own
    connection, so concurrent tool calls never share a cursor.
    """

    def __init__(self) -> None:
        self._pool: aiomysql.Pool | None = None
        self._timeout: float | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        missing = config.missing()
        if missing:
            raise AdapterError(f"MySQL requires {', '.join(missing)}")
        self._timeout = config.query_timeout
        try:
            self._pool = await aiomysql.create_pool(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password,
                db=config.database,
                minsize=1,
                maxsize=config.pool_size,
                autocommit=True,
                cursorclass=aiomysql.DictCursor,
            )
        except Exception as e:
            raise AdapterError(f"MySQL connection failed: {describe_error(e)}") from e
        logger.info(
            "Connected to MySQL at %s:%s/%s (pool size %d)",
            config.host, config.port, config.database, config.pool_size,
        )

    async def close(self) -> None:
        if self._pool is not None:
            # close() also aborts connections still checked out by in-flight queries
            self._pool.close()
            await self._pool.wait_closed()
            self._pool = None
            logger.info("Database connection closed")

    def _ensure_pool(self) -> aiomysql.Pool:
        if self._pool is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._pool

    async def execute(
        self, sql: str, params: Sequence[object] | None = None
    ) -> ExecutionResult:
        pool = self._ensure_pool()
        try:
            sql, bound = translate_qmark_params(sql, params)
        except ValueError as e:
            raise AdapterError(str(e)) from e

        async def _run() -> ExecutionResult:
            async with pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(sql, bound)
                    if cur.description:
                        columns = [desc[0] for desc in cur.description]
                        rows = list(await cur.fetchall())
                        return ExecutionResult(columns=columns, rows=rows, row_count=len(rows))
                    return ExecutionResult(
                        columns=[],
                        rows=[],
                        row_count=0,
                        affected_rows=cur.rowcount,
                        last_insert_id=cur.lastrowid or None,
                    )

        t0 = time.monotonic()
        try:
            if self._timeout:
                result = await asyncio.wait_for(_run(), timeout=self._timeout)
            else:
                result = await _run()
        except asyncio.TimeoutError as e:
            raise QueryTimeout(self._timeout or 0) from e
        except Exception as e:
            raise AdapterError(describe_error(e)) from e
        result.duration_ms = (time.monotonic() - t0) * 1000
        return result

    def dialect(self) -> str:
        return "mysql"
