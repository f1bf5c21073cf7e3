"""
Loader options.

Resolved in this order:
1. Defaults (this file)
2. Environment variables (JSON_SHAPE_*) override defaults
3. Keyword overrides passed by the caller override everything
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from .paths import ROOT, parse_record_path

STRICT = 'strict'
LENIENT = 'lenient'
MALFORMED_LINE_POLICIES = (STRICT, LENIENT)

OVERWRITE = 'overwrite'
KEEP = 'keep'
METADATA_CONFLICT_RULES = (OVERWRITE, KEEP)


@dataclass(frozen=True)
class LoaderOptions:
    """How records are located, decorated and flattened."""
    record_path: Optional[Tuple[str, ...]] = None  # object shape only
    metadata_keys: Tuple[str, ...] = field(default_factory=tuple)  # object shape only
    on_malformed_line: str = STRICT  # line-delimited only
    metadata_conflict: str = OVERWRITE
    separator: str = '.'

    def __post_init__(self):
        # '' and '(root)' mean "not chosen": object input then auto-selects.
        if self.record_path in ('', ROOT):
            object.__setattr__(self, 'record_path', None)
        elif self.record_path is not None:
            object.__setattr__(self, 'record_path', parse_record_path(self.record_path))
        object.__setattr__(self, 'metadata_keys', _as_key_tuple(self.metadata_keys))

        if self.on_malformed_line not in MALFORMED_LINE_POLICIES:
            raise ValueError(
                f"on_malformed_line must be one of {MALFORMED_LINE_POLICIES}, got {self.on_malformed_line!r}"
            )
        if self.metadata_conflict not in METADATA_CONFLICT_RULES:
            raise ValueError(
                f"metadata_conflict must be one of {METADATA_CONFLICT_RULES}, got {self.metadata_conflict!r}"
            )
        if not isinstance(self.separator, str) or not self.separator:
            raise ValueError("separator must be a non-empty string")

    @property
    def strict(self) -> bool:
        return self.on_malformed_line == STRICT


def _as_key_tuple(keys: Any) -> Tuple[str, ...]:
    if not keys:
        return ()
    if isinstance(keys, str):
        return (keys,)
    if isinstance(keys, (set, frozenset)):
        # Sets carry no order; sort so runs are reproducible.
        return tuple(sorted(str(k) for k in keys))
    return tuple(str(k) for k in keys)


_ENV_MAP: Dict[str, str] = {
    'JSON_SHAPE_ON_MALFORMED_LINE': 'on_malformed_line',
    'JSON_SHAPE_METADATA_CONFLICT': 'metadata_conflict',
    'JSON_SHAPE_SEPARATOR': 'separator',
}


def _env_overrides(environ=None) -> Dict[str, str]:
    environ = os.environ if environ is None else environ
    values: Dict[str, str] = {}
    for env_key, attr in _ENV_MAP.items():
        val = environ.get(env_key)
        if val is None or val == '':
            continue
        values[attr] = val if attr == 'separator' else val.strip().lower()
    return values


def load_options(base: Optional[LoaderOptions] = None, environ=None, **overrides) -> LoaderOptions:
    """Build options from defaults, then JSON_SHAPE_* env vars, then keyword overrides.

    An explicit `base` replaces the defaults and the environment.
    """
    options = base or LoaderOptions()
    values = _env_overrides(environ) if base is None else {}
    values.update({k: v for k, v in overrides.items() if v is not None})
    if not values:
        return options
    return replace(options, **values)
