import json
import sqlite3

import pytest

from repoquery.helpers import register, str_split, toml_to_json, xml_to_json, yaml_to_json
from repoquery.rows import row_content


@pytest.fixture
def db():
    conn = sqlite3.connect(":memory:")
    register(conn)
    yield conn
    conn.close()


def test_str_split(db):
    _, contents = row_content(db.execute("SELECT str_split('hello world', ' ', 0)"))
    assert contents[0][0] == "hello"
    _, contents = row_content(db.execute("SELECT str_split('hello world', ' ', 10)"))
    assert contents[0][0] == "NULL"


def test_str_split_direct():
    assert str_split("a,b,c", ",", 2) == "c"
    assert str_split("a,b,c", ",", 3) is None


def test_toml_to_json(db):
    _, contents = row_content(db.execute("""SELECT toml_to_json('[package] 
	name = "hog"')"""))
    assert contents[0][0] == '{"package":{"name":"hog"}}'


def test_toml_invalid():
    with pytest.raises(ValueError):
        toml_to_json("[package")


def test_xml_to_json(db):
    _, contents = row_content(db.execute("""SELECT xml_to_json('
	<?xml version ="1.0" encoding="UTF-8"?>
	<employee>
		<fname>john</fname>
		<lname>doe</lname>
		<home>neverland</home>
	</employee>')"""))
    assert contents[0][0] == '{"employee":{"fname":"john","home":"neverland","lname":"doe"}}'


def test_xml_repeated_and_attributes():
    out = json.loads(xml_to_json('<a id="1"><b>x</b><b>y</b></a>'))
    assert out == {"a": {"-id": "1", "b": ["x", "y"]}}


def test_xml_invalid():
    with pytest.raises(ValueError):
        xml_to_json("<a>")


def test_yml_to_json(db):
    _, contents = row_content(db.execute("""SELECT yml_to_json('doe: "a deer, a female deer"')"""))
    assert contents[0][0] == '{"doe":"a deer, a female deer"}'


def test_yaml_alias_matches(db):
    a = db.execute("SELECT yaml_to_json('k: [1, 2]')").fetchone()[0]
    b = db.execute("SELECT yml_to_json('k: [1, 2]')").fetchone()[0]
    assert a == b == yaml_to_json("k: [1, 2]")