"""Reading query results as rows of strings."""

from __future__ import annotations

from typing import Any


def _as_text(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def row_content(cursor: Any) -> tuple[int, list[list[str]]]:
    """Return the column count and every row as strings, NULL shown as "NULL"."""
    col_count = len(cursor.description or ())
    contents = [[_as_text(v) for v in row] for row in cursor]
    return col_count, contents