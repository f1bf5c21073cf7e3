from __future__ import annotations

from typing import Any, Dict, Sequence

from .errors import PathNotFound, SchemaMismatch
from .paths import format_record_path
from .schema_utils import json_type_name


def resolve_record_path(document: Any, path: Sequence[str]) -> Any:
    """Walk `path` through nested objects and return the value it names.

    Raises PathNotFound for a missing key and SchemaMismatch when a
    non-object is reached before the path ends.
    """
    keys = list(path)
    val = document
    walked = []
    i = 0
    while i < len(keys):
        key = keys[i]
        if not isinstance(val, dict):
            raise SchemaMismatch(
                f"Cannot look up {key!r} under {format_record_path(walked)}: "
                f"value is {json_type_name(val)}, expected object"
            )

        if key in val:
            val = val[key]
            walked.append(key)
            i += 1
            continue

        # Fallback for unescaped dotted keys (e.g. 'gpt-3.5-turbo') that were
        # split apart when the path was given as a string.
        matched = False
        candidate = key
        for j in range(i + 1, len(keys)):
            candidate = candidate + '.' + keys[j]
            if candidate in val:
                val = val[candidate]
                walked.append(candidate)
                i = j + 1
                matched = True
                break
        if not matched:
            raise PathNotFound(
                f"Key {key!r} not found under {format_record_path(walked)} "
                f"(record path {format_record_path(keys)})",
                path=keys,
                missing=key,
            )
    return val


def resolve_record_list(document: Any, path: Sequence[str]) -> list:
    """Resolve `path` and require it to name an array."""
    target = resolve_record_path(document, path)
    if not isinstance(target, list):
        raise SchemaMismatch(
            f"Record path {format_record_path(path)} points to {json_type_name(target)}, expected array"
        )
    return target


def select_metadata(document: Dict[str, Any], keys: Sequence[str]) -> Dict[str, Any]:
    """Pick `keys` from the top-level object, in the order given."""
    missing = [k for k in keys if k not in document]
    if missing:
        raise PathNotFound(
            f"Metadata key(s) not found at top level: {', '.join(missing)}",
            path=(),
            missing=missing[0],
        )
    return {k: document[k] for k in keys}
