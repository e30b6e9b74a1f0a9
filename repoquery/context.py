"""Key-value configuration shared with the extension functions and tables."""

from __future__ import annotations

import re

_INT_RE = re.compile(r"[+-]?[0-9]+")


class Context(dict):
    """A mapping of string keys to string values, such as API tokens or limits."""

    def get_int(self, key: str) -> int | None:
        """Return the value under ``key`` parsed as an int.

        Returns None when the key is unset, empty or not a whole decimal number.
        """
        value = self.get(key)
        if not value or not _INT_RE.fullmatch(value):
            return None
        return int(value)