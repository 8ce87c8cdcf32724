"""JSON pretty-printing shared by every diagnostic message."""

import json
from typing import Any


def pretty_json(value: Any) -> str:
    """Render *value* with 2-space indentation, keeping key insertion order."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=_fallback)


def _fallback(value: Any) -> Any:
    # sets are rendered as arrays, anything else by its string form
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def compact_json(value: Any) -> str:
    """Render *value* on one line without whitespace between tokens."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_fallback)
