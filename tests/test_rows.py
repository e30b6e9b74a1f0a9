import sqlite3

import pytest

from repoquery.rows import row_content


@pytest.fixture
def db():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


def test_nulls_rendered(db):
    count, contents = row_content(db.execute("SELECT 'a', NULL"))
    assert count == 2
    assert contents == [["a", "NULL"]]


def test_values_become_text(db):
    db.execute("CREATE TABLE t (n INTEGER, b BLOB)")
    db.execute("INSERT INTO t VALUES (?, ?)", (5, b"xy"))
    db.execute("INSERT INTO t VALUES (?, ?)", (6, None))
    count, contents = row_content(db.execute("SELECT n, b FROM t ORDER BY n"))
    assert count == 2
    assert contents == [["5", "xy"], ["6", "NULL"]]


def test_no_rows_keeps_column_count(db):
    db.execute("CREATE TABLE t (a, b, c)")
    count, contents = row_content(db.execute("SELECT * FROM t"))
    assert count == 3
    assert contents == []