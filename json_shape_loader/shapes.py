"""
Top-level shape detection.

A file is one of:
- line-delimited: the first non-blank line is a complete JSON value and more
  non-blank lines follow it (JSON Lines / NDJSON). A lone line counts too when
  the file is named .jsonl/.ndjson or it is an object with no list of records;
- array: the whole file is one JSON array;
- object: the whole file is one JSON object.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, List, Tuple, Union

from .errors import MalformedInput, SchemaMismatch
from .io_utils import iter_lines, prepare_source, read_text, source_origin
from .schema_utils import find_record_paths, json_type_name

logger = logging.getLogger(__name__)


class Shape(str, Enum):
    LINE_DELIMITED = 'line-delimited'
    ARRAY = 'array'
    OBJECT = 'object'


class LineSource:
    """Restartable view over the lines of a source; each iteration rereads it."""

    def __init__(self, source: Any):
        self.source = source

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        return iter_lines(self.source)


@dataclass(frozen=True)
class LineDelimitedInput:
    origin: str
    lines: LineSource
    shape: ClassVar[Shape] = Shape.LINE_DELIMITED


@dataclass(frozen=True)
class ArrayInput:
    origin: str
    items: List[Any]
    shape: ClassVar[Shape] = Shape.ARRAY


@dataclass(frozen=True)
class ObjectInput:
    origin: str
    document: Dict[str, Any]
    shape: ClassVar[Shape] = Shape.OBJECT


DetectedInput = Union[LineDelimitedInput, ArrayInput, ObjectInput]


LINE_DELIMITED_SUFFIXES = ('.jsonl', '.ndjson')

_EMPTY = 'empty'
_SINGLE_LINE = 'single-line'
_MANY_LINES = 'many-lines'
_DOCUMENT = 'document'


def _parses(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _peek_layout(source: Any) -> str:
    """Classify the line layout after peeking at most two non-blank lines.

    Returns one of: empty, single-line (one complete value on one line),
    many-lines (a complete value followed by more content) or document
    (the first line is not a complete value).
    """
    lines = iter_lines(source)
    first_ok = None
    try:
        for _, text in lines:
            if not text.strip():
                continue
            if first_ok is None:
                first_ok = _parses(text)
                if not first_ok:
                    return _DOCUMENT
                continue
            return _MANY_LINES
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"input is not valid UTF-8: {exc}", source_origin(source)) from exc
    finally:
        lines.close()
    return _EMPTY if first_ok is None else _SINGLE_LINE


def _single_record_line(origin: str, document: Any) -> bool:
    """A lone line is one JSON Lines record unless it is a wrapped object.

    The file name decides when it says .jsonl/.ndjson; otherwise an object
    without any list of records cannot be a wrapped object.
    """
    if origin.lower().endswith(LINE_DELIMITED_SUFFIXES):
        return True
    return isinstance(document, dict) and not find_record_paths(document)


def parse_document(source: Any) -> Any:
    """Parse the whole source as a single JSON value."""
    origin = source_origin(source)
    try:
        return json.loads(read_text(source))
    except json.JSONDecodeError as exc:
        raise MalformedInput(exc.msg, origin, exc.lineno) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"input is not valid UTF-8: {exc}", origin) from exc


def detect_shape(source: Any) -> DetectedInput:
    """Classify `source` and return the dispatch-ready representation.

    Line-delimited input is not parsed here beyond its first line; its
    records are parsed one at a time during extraction.
    """
    source = prepare_source(source)
    origin = source_origin(source)

    layout = _peek_layout(source)
    if layout == _EMPTY:
        raise MalformedInput("input is empty", origin)
    if layout == _MANY_LINES:
        logger.info("%s: detected %s input", origin, Shape.LINE_DELIMITED.value)
        return LineDelimitedInput(origin=origin, lines=LineSource(source))

    document = parse_document(source)
    if layout == _SINGLE_LINE and _single_record_line(origin, document):
        logger.info("%s: detected %s input with a single line", origin, Shape.LINE_DELIMITED.value)
        return LineDelimitedInput(origin=origin, lines=LineSource(source))
    if isinstance(document, list):
        logger.info("%s: detected %s input with %d items", origin, Shape.ARRAY.value, len(document))
        return ArrayInput(origin=origin, items=document)
    if isinstance(document, dict):
        logger.info("%s: detected %s input with %d top-level keys", origin, Shape.OBJECT.value, len(document))
        return ObjectInput(origin=origin, document=document)

    raise SchemaMismatch(
        f"{origin}: top-level JSON value is {json_type_name(document)}, expected an array or object"
    )
