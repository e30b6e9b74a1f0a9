"""Copying the results of a query into a PostgreSQL table."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

_log = logging.getLogger("repoquery.pgsync")

_POSTGRES_TYPES = {
    "TEXT": "text",
    "INT": "integer",
    "INTEGER": "integer",
    "DATETIME": "timestamp with time zone",
    "BOOLEAN": "boolean",
}


def quote_identifier(name: str) -> str:
    """Quote a PostgreSQL identifier, cutting it at any NUL character."""
    name = str(name)
    end = name.find("\x00")
    if end >= 0:
        name = name[:end]
    return '"' + name.replace('"', '""') + '"'


def sqlite_type_to_postgres_type(decl_type: str | None) -> str:
    """Map an SQLite declared column type to a PostgreSQL column type."""
    return _POSTGRES_TYPES.get((decl_type or "").upper(), "text")


def create_table_from_sqlite_types(table_name: str, columns: Iterable[tuple[str, str | None]]) -> str:
    """Build a PostgreSQL CREATE TABLE statement from ``(name, declared type)`` pairs."""
    body = ",".join(
        f"\n\t\t\t{quote_identifier(name)} {sqlite_type_to_postgres_type(decl)}"
        for name, decl in columns
    )
    return f"CREATE TABLE {quote_identifier(table_name)} ({body}\n\t  )"


def sync(
    source: Any,
    target: Any,
    table_name: str,
    query: str,
    columns: Mapping[str, str] | None = None,
) -> int:
    """Run ``query`` on ``source`` and replace ``table_name`` in ``target`` with its rows.

    ``columns`` maps result column names to declared SQLite types; columns not
    listed become text. The existing table is dropped. Returns the row count.
    """
    log = logging.LoggerAdapter(_log, {"pgTable": table_name})
    rows = source.cursor()
    rows.execute(query)
    names = [d[0] for d in rows.description or ()]
    declared = dict(columns or {})
    col_types = [(name, declared.get(name)) for name in names]

    temp_new = f"{table_name}_temp"
    temp_drop = f"{table_name}_drop"
    create_sql = create_table_from_sqlite_types(temp_new, col_types)
    insert_sql = (
        f"INSERT INTO {quote_identifier(temp_new)} "
        f"({', '.join(quote_identifier(n) for n in names)}) "
        f"VALUES ({', '.join(['%s'] * len(names))})"
    )

    out = target.cursor()
    count = 0
    try:
        out.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ")
        out.execute(create_sql)
        for row in rows:
            out.execute(insert_sql, tuple(row))
            count += 1
        out.execute(f'ALTER TABLE IF EXISTS "{table_name}" RENAME to {temp_drop}')
        out.execute(f'ALTER TABLE IF EXISTS "{temp_new}" RENAME TO "{table_name}"')
        out.execute(f'DROP TABLE IF EXISTS "{temp_drop}"')
        target.commit()
    except Exception:
        log.exception("sync of %s failed", table_name)
        target.rollback()
        raise
    finally:
        out.close()
    return count