from __future__ import annotations

from typing import Any, List, Tuple


def json_type_name(value: Any) -> str:
    """JSON name of a parsed value's type, for error messages."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__


def find_record_paths(data: Any, parent: Tuple[str, ...] = ()) -> List[Tuple[str, ...]]:
    """Find key paths inside an object that point to a list of records.

    A list counts when it is non-empty and its first element is a mapping.
    Paths are returned in document order; nested objects are searched too,
    lists are not descended into.
    """
    paths: List[Tuple[str, ...]] = []
    if not isinstance(data, dict):
        return paths
    for k, v in data.items():
        current = parent + (k,)
        if isinstance(v, list):
            if v and isinstance(v[0], dict):
                paths.append(current)
        elif isinstance(v, dict):
            paths.extend(find_record_paths(v, current))
    return paths


def find_metadata_keys(data: Any) -> List[str]:
    """Top-level keys of an object whose values are scalars."""
    if not isinstance(data, dict):
        return []
    return [k for k, v in data.items() if not isinstance(v, (dict, list))]
