"""Flattening of nested JSON values into path -> string mappings."""

import json
from typing import Any, Dict

from cwlogs.core.constants import MAX_FLATTEN_DEPTH


def format_json_value(value: Any) -> str:
    """Render a JSON scalar the way it appears in a table cell.

    Strings are unquoted, ``None`` is empty, booleans are lower case.
    Containers fall back to compact JSON text.
    """
    if value is None:
        return ""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return repr(value) if isinstance(value, float) else str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _flatten_into(result: Dict[str, str], value: Any, prefix: str, depth: int, max_depth: int) -> None:
    if isinstance(value, (dict, list)) and depth >= max_depth:
        result[prefix] = format_json_value(value)
        return

    if isinstance(value, dict):
        for key, item in value.items():
            _flatten_into(result, item, _join(prefix, str(key)), depth + 1, max_depth)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _flatten_into(result, item, f"{prefix}[{index}]", depth + 1, max_depth)
    else:
        result[prefix] = format_json_value(value)


def flatten_json(value: Any, prefix: str = "", max_depth: int = MAX_FLATTEN_DEPTH) -> Dict[str, str]:
    """Flatten a parsed JSON value.

    Object fields become ``prefix.key`` (or ``key`` at the top level) and
    array elements ``prefix[i]``. Scalars at the top level produce a single
    entry at ``prefix``. Containers nested deeper than ``max_depth`` are kept
    as compact JSON text at their path.

    Args:
        value: Value produced by ``json.loads``
        prefix: Path of ``value`` itself
        max_depth: Maximum container nesting to descend into

    Returns:
        Mapping of path to string value, sorted by path
    """
    result: Dict[str, str] = {}
    _flatten_into(result, value, prefix, 0, max_depth)
    return dict(sorted(result.items()))
