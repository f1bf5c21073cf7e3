from __future__ import annotations

from typing import Any, Optional

from .config import LoaderOptions, load_options
from .flattening import Table, normalize
from .records import extract_records
from .shapes import detect_shape


def load_table(source: Any, options: Optional[LoaderOptions] = None, should_cancel=None, **overrides) -> Table:
    """Detect, extract and normalize `source` into a Table.

    `overrides` are LoaderOptions fields (record_path, metadata_keys,
    on_malformed_line, metadata_conflict, separator) applied on top of
    `options` (or, without `options`, on the JSON_SHAPE_* environment).
    """
    options = load_options(options, **overrides)
    detected = detect_shape(source)
    extraction = extract_records(detected, options, should_cancel=should_cancel)
    return normalize(extraction, options.separator)
