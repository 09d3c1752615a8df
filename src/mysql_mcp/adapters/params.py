"""Translate ``?`` placeholders to the ``%s`` format aiomysql/PyMySQL expects."""

from __future__ import annotations

from collections.abc import Sequence

_QUOTES = ("'", '"', "`")


def translate_qmark_params(
    sql: str, params: Sequence[object] | None
) -> tuple[str, list[object] | None]:
    """Rewrite positional ``?`` placeholders as ``%s`` and escape literal ``%``.

    Placeholders inside quoted strings, backtick identifiers and comments are
    left alone. Without params the SQL is returned untouched (no formatting
    pass happens driver-side either).

    Raises ValueError when the placeholder count differs from ``len(params)``.
    """
    if not params:
        if _placeholder_count(sql):
            raise ValueError("query has ? placeholders but no params were given")
        return sql, None

    out: list[str] = []
    count = 0
    for chunk, is_code in _split(sql):
        if is_code:
            count += chunk.count("?")
            chunk = chunk.replace("%", "%%").replace("?", "%s")
        else:
            chunk = chunk.replace("%", "%%")
        out.append(chunk)

    if count != len(params):
        raise ValueError(f"expected {count} params for ? placeholders, got {len(params)}")
    return "".join(out), list(params)


def _placeholder_count(sql: str) -> int:
    return sum(chunk.count("?") for chunk, is_code in _split(sql) if is_code)


def _split(sql: str) -> list[tuple[str, bool]]:
    """Split SQL into (text, is_code) chunks; quoted and comment chunks are not code."""
    chunks: list[tuple[str, bool]] = []
    i, start, n = 0, 0, len(sql)
    while i < n:
        ch = sql[i]
        end = None
        if ch in _QUOTES:
            end = i + 1
            while end < n:
                if sql[end] == "\\" and ch != "`":
                    end += 2
                    continue
                if sql[end] == ch:
                    if end + 1 < n and sql[end + 1] == ch:  # doubled quote escape
                        end += 2
                        continue
                    break
                end += 1
            end = min(end + 1, n)
        elif sql.startswith("--", i) or ch == "#":
            newline = sql.find("\n", i)
            end = n if newline == -1 else newline
        elif sql.startswith("/*", i):
            close = sql.find("*/", i + 2)
            end = n if close == -1 else close + 2

        if end is None:
            i += 1
            continue
        if start < i:
            chunks.append((sql[start:i], True))
        chunks.append((sql[i:end], False))
        i = start = end
    if start < n:
        chunks.append((sql[start:], True))
    return chunks
