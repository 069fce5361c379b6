from __future__ import annotations

import re
from typing import Any

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_count(value: str | None, default: int = 5) -> int:
    """Parse a count the way a lenient base-10 ``parseInt`` would.

    Empty or missing values fall back to ``default``; trailing garbage is
    ignored (``"3abc"`` -> 3) and an unparseable value yields 0.
    """
    if value is None or value == "":
        return default
    match = _LEADING_INT_RE.match(value)
    if not match:
        return 0
    return int(match.group(1))


def dig(data: Any, *keys: str, default: Any = None) -> Any:
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    if current is None:
        return default
    return current
