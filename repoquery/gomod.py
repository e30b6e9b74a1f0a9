"""Parsing of go.mod files into JSON."""

from __future__ import annotations

import json
import re
import sqlite3
from typing import Any

_TOKEN_RE = re.compile(r'"(?:[^"\\]|\\.)*"|`[^`]*`|=>|[\[\],()]|[^\s\[\],()"`]+')
_DIRECTIVES = {"module", "go", "require", "exclude", "replace", "retract"}


class GoModError(ValueError):
    """Raised when a go.mod file cannot be parsed."""


def _unquote(token: str) -> str:
    if token.startswith("`"):
        return token[1:-1]
    if token.startswith('"'):
        return json.loads(token)
    return token


def _version(path: str, version: str = "") -> dict[str, str]:
    out = {"path": path}
    if version:
        out["version"] = version
    return out


def _split_comment(line: str) -> tuple[str, str | None]:
    pos = line.find("//")
    if pos < 0:
        return line, None
    return line[:pos], line[pos + 2:].strip()


def _parse_entry(verb: str, tokens: list[str], comment: str | None,
                 rationale: list[str], result: dict[str, Any], lineno: int) -> None:
    def fail(msg: str) -> GoModError:
        return GoModError(f"go.mod:{lineno}: {msg}")

    if verb == "module":
        if len(tokens) != 1:
            raise fail("usage: module module/path")
        result["version"] = _version(_unquote(tokens[0]))
    elif verb == "go":
        if len(tokens) != 1:
            raise fail("usage: go 1.23")
        result["go"] = tokens[0]
    elif verb in ("require", "exclude"):
        if len(tokens) != 2:
            raise fail(f"usage: {verb} module/path v1.2.3")
        mod = _version(_unquote(tokens[0]), _unquote(tokens[1]))
        if verb == "require":
            entry: dict[str, Any] = {"mod": mod}
            if comment is not None and comment.split(";")[0].strip() == "indirect":
                entry["indirect"] = True
            result["require"].append(entry)
        else:
            result["exclude"].append({"Mod": mod})
    elif verb == "replace":
        if "=>" not in tokens:
            raise fail("usage: replace module/path [v1.2.3] => other/module v1.4")
        arrow = tokens.index("=>")
        old, new = tokens[:arrow], tokens[arrow + 1:]
        if len(old) not in (1, 2) or len(new) not in (1, 2):
            raise fail("usage: replace module/path [v1.2.3] => other/module v1.4")
        result["replace"].append({
            "old": _version(*(_unquote(t) for t in old)),
            "new": _version(*(_unquote(t) for t in new)),
        })
    elif verb == "retract":
        if len(tokens) == 1:
            low = high = _unquote(tokens[0])
        elif len(tokens) == 5 and tokens[0] == "[" and tokens[2] == "," and tokens[4] == "]":
            low, high = _unquote(tokens[1]), _unquote(tokens[3])
        else:
            raise fail("usage: retract v1.2.3 or retract [v1.0.0, v1.9.9]")
        reasons = list(rationale)
        if comment:
            reasons.append(comment)
        result["retract"].append({"low": low, "high": high, "rationale": "\n".join(reasons)})


def parse_go_mod(data: str | bytes) -> dict[str, Any]:
    """Parse go.mod text into a dict shaped like its JSON form."""
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    result: dict[str, Any] = {
        "version": {"path": ""}, "go": "",
        "require": [], "exclude": [], "replace": [], "retract": [],
    }
    block: str | None = None
    pending: list[str] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        code, comment = _split_comment(raw)
        tokens = _TOKEN_RE.findall(code)
        if not tokens:
            if comment is not None:
                pending.append(comment)
            else:
                pending = []
            continue
        if block is not None:
            if tokens == [")"]:
                block = None
            else:
                _parse_entry(block, tokens, comment, pending, result, lineno)
            pending = []
            continue
        verb, rest = tokens[0], tokens[1:]
        if verb not in _DIRECTIVES:
            raise GoModError(f"go.mod:{lineno}: unknown directive: {verb}")
        if rest == ["("]:
            if verb in ("module", "go"):
                raise GoModError(f"go.mod:{lineno}: {verb} cannot be a block")
            block = verb
            continue
        if rest == ["(", ")"]:
            pending = []
            continue
        _parse_entry(verb, rest, comment, pending, result, lineno)
        pending = []
    if block is not None:
        raise GoModError("go.mod: unterminated block")
    return result


def go_mod_to_json(data: str | bytes | None) -> str | None:
    """Return the JSON form of a go.mod file, or None for empty input."""
    if not data:
        return None
    return json.dumps(parse_go_mod(data), separators=(",", ":"), ensure_ascii=False)


def register(connection: sqlite3.Connection) -> None:
    """Register go_mod_to_json on an SQLite connection."""
    connection.create_function("go_mod_to_json", 1, go_mod_to_json, deterministic=True)