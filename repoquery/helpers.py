"""Utility SQL functions: string splitting and TOML/YAML/XML to JSON."""

from __future__ import annotations

import datetime
import json
import sqlite3
import tomllib
import xml.etree.ElementTree as ET
from typing import Any

import yaml


def _text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    raise TypeError(f"cannot encode {type(value).__name__} as JSON")


def _dumps(value: Any) -> str:
    return json.dumps(
        value, separators=(",", ":"), sort_keys=True, ensure_ascii=False, default=_json_default
    )


def str_split(text: str, separator: str, index: int) -> str | None:
    """Split ``text`` on ``separator`` and return the part at ``index``, or None."""
    text, separator = _text(text), _text(separator)
    index = int(index)
    if index < 0:
        raise IndexError(f"index out of range: {index}")
    parts = list(text) if separator == "" else text.split(separator)
    return parts[index] if index < len(parts) else None


def toml_to_json(text: str | bytes) -> str:
    """Convert a TOML document to compact JSON."""
    return _dumps(tomllib.loads(_text(text)))


def _stringify_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _stringify_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_keys(v) for v in value]
    return value


def yaml_to_json(text: str | bytes) -> str:
    """Convert a YAML document to compact JSON."""
    return _dumps(_stringify_keys(yaml.safe_load(_text(text))))


def _element_value(element: ET.Element) -> Any:
    result: dict[str, Any] = {f"-{k}": v for k, v in element.attrib.items()}
    for child in element:
        value = _element_value(child)
        if child.tag in result:
            existing = result[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[child.tag] = [existing, value]
        else:
            result[child.tag] = value
    text = (element.text or "").strip()
    if not result:
        return text
    if text:
        result["#text"] = text
    return result


def xml_to_json(text: str | bytes) -> str:
    """Convert an XML document to compact JSON keyed by element names."""
    data = text if isinstance(text, bytes) else _text(text).encode("utf-8")
    try:
        root = ET.fromstring(data.strip())
    except ET.ParseError as exc:
        raise ValueError(f"invalid XML: {exc}") from exc
    return _dumps({root.tag: _element_value(root)})


def register(connection: sqlite3.Connection) -> None:
    """Register the helper functions on an SQLite connection."""
    functions = {
        "str_split": (str_split, 3),
        "toml_to_json": (toml_to_json, 1),
        "yaml_to_json": (yaml_to_json, 1),
        "yml_to_json": (yaml_to_json, 1),
        "xml_to_json": (xml_to_json, 1),
    }
    for name, (fn, nargs) in functions.items():
        connection.create_function(name, nargs, fn, deterministic=True)