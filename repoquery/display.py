"""Rendering of query results as a table, CSV, TSV, JSON lines or a single value."""

from __future__ import annotations

import base64
import csv
import json
import os
from typing import Any, TextIO

from tabulate import tabulate

_DEFAULT_WIDTH = 500
_TRUNCATION_MARK = " ~"


def _columns(cursor: Any) -> list[str]:
    return [d[0] for d in (cursor.description or ())]


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _json_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def _terminal_width() -> int:
    try:
        return os.get_terminal_size(0).columns
    except (OSError, ValueError):
        return _DEFAULT_WIDTH


def _truncate(line: str, width: int) -> str:
    if width <= 0 or len(line) <= width:
        return line
    keep = max(width - len(_TRUNCATION_MARK), 0)
    return line[:keep] + _TRUNCATION_MARK


def _single(cursor: Any, stream: TextIO) -> None:
    if not _columns(cursor):
        raise ValueError("query returned no columns")
    row = cursor.fetchone()
    if row is None:
        raise ValueError("no rows in result set")
    value = row[0]
    stream.write("" if value is None else _to_text(value))


def _delimited(cursor: Any, stream: TextIO, delimiter: str) -> None:
    writer = csv.writer(stream, delimiter=delimiter, lineterminator="\n")
    writer.writerow(_columns(cursor))
    for row in cursor:
        writer.writerow(["" if v is None else _to_text(v) for v in row])


def _json_lines(cursor: Any, stream: TextIO) -> None:
    columns = _columns(cursor)
    for row in cursor:
        record = {name: _json_value(value) for name, value in zip(columns, row)}
        stream.write(json.dumps(record, separators=(",", ":"), sort_keys=True))
        stream.write("\n")


def _table(cursor: Any, stream: TextIO, interactive: bool) -> None:
    columns = _columns(cursor)
    rows = [["NULL" if v is None else _to_text(v) for v in row] for row in cursor]
    rendered = tabulate(rows, headers=columns, tablefmt="grid", disable_numparse=True)
    lines = rendered.splitlines()
    if not interactive:
        width = _terminal_width()
        lines = [_truncate(line, width) for line in lines]
    stream.write("\n".join(lines) + "\n")


def write_to(cursor: Any, stream: TextIO, fmt: str = "table", interactive: bool = False) -> None:
    """Write the rows of ``cursor`` to ``stream`` in the given format.

    Formats are ``single``, ``csv``, ``tsv`` and ``json``; anything else renders
    a table, whose lines are cut to the terminal width unless ``interactive``.
    """
    match fmt:
        case "single":
            _single(cursor, stream)
        case "csv":
            _delimited(cursor, stream, ",")
        case "tsv":
            _delimited(cursor, stream, "\t")
        case "json":
            _json_lines(cursor, stream)
        case _:
            _table(cursor, stream, interactive)