"""Core logic for JSON Shape Loader.

The Gradio UI lives in `app.py`. This package contains the pieces that:
- detect whether a file is JSON Lines, a bare array or a wrapped object
- extract records (with broadcast metadata for wrapped objects)
- flatten records into rows sharing one column set
"""

from .errors import ExtractionCancelled, JSONShapeError, MalformedInput, PathNotFound, SchemaMismatch
from .flattening import ABSENT, Table, flatten_record, normalize
from .loader import load_table
from .records import extract_records
from .shapes import Shape, detect_shape

__all__ = [
    'ABSENT',
    'ExtractionCancelled',
    'JSONShapeError',
    'MalformedInput',
    'PathNotFound',
    'SchemaMismatch',
    'Shape',
    'Table',
    'detect_shape',
    'extract_records',
    'flatten_record',
    'load_table',
    'normalize',
]
