import csv
import io
import json
import sqlite3

import pytest

from repoquery.display import write_to

ROWS = [("1", "name 1", "value 1"), ("2", "name 2", "value 2"), ("3", "name 3", "value 3")]


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE t (id TEXT, name TEXT, value TEXT)")
    conn.executemany("INSERT INTO t VALUES (?, ?, ?)", ROWS)
    yield conn
    conn.close()


@pytest.fixture
def cursor(connection):
    return connection.execute("SELECT id, name, value FROM t ORDER BY id")


def test_table_has_at_least_three_lines(cursor):
    out = io.StringIO()
    write_to(cursor, out, "table", False)
    assert len(out.getvalue().splitlines()) >= 3
    assert "name 2" in out.getvalue()


def test_table_shows_null(connection):
    cur = connection.execute("SELECT NULL AS missing")
    out = io.StringIO()
    write_to(cur, out, "table", True)
    assert "NULL" in out.getvalue()
    assert "missing" in out.getvalue()


def test_csv(cursor):
    out = io.StringIO()
    write_to(cursor, out, "csv", False)
    records = list(csv.reader(io.StringIO(out.getvalue())))
    assert len(records) == 4
    assert len(records[0]) == 3
    assert records[0] == ["id", "name", "value"]
    assert records[1] == list(ROWS[0])


def test_tsv(cursor):
    out = io.StringIO()
    write_to(cursor, out, "tsv", False)
    records = list(csv.reader(io.StringIO(out.getvalue()), delimiter="\t"))
    assert len(records) == 4
    assert len(records[0]) == 3
    assert records[3] == list(ROWS[2])


def test_csv_null_is_empty(connection):
    cur = connection.execute("SELECT NULL AS a, 'x' AS b")
    out = io.StringIO()
    write_to(cur, out, "csv", False)
    records = list(csv.reader(io.StringIO(out.getvalue())))
    assert records[1] == ["", "x"]


def test_json(cursor):
    out = io.StringIO()
    write_to(cursor, out, "json", False)
    text = out.getvalue()
    assert text.count("\n") == 3
    first = json.loads(text.splitlines()[0])
    assert first == {"id": "1", "name": "name 1", "value": "value 1"}


def test_single(cursor):
    out = io.StringIO()
    write_to(cursor, out, "single", False)
    assert out.getvalue() == "1"


def test_single_without_rows_raises(connection):
    cur = connection.execute("SELECT id FROM t WHERE id = 'none'")
    with pytest.raises(ValueError):
        write_to(cur, io.StringIO(), "single", False)