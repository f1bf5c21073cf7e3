from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from .accessors import resolve_record_list, select_metadata
from .config import OVERWRITE, LoaderOptions
from .errors import ExtractionCancelled, MalformedInput, PathNotFound, SchemaMismatch
from .paths import format_record_path
from .schema_utils import find_record_paths, json_type_name
from .shapes import ArrayInput, DetectedInput, LineDelimitedInput, ObjectInput, Shape

logger = logging.getLogger(__name__)


@dataclass
class ExtractionReport:
    """Counters for one pass over the records."""
    records: int = 0
    skipped_lines: int = 0
    skipped_line_numbers: List[int] = field(default_factory=list)


def _cancel_check(should_cancel: Any) -> Optional[Callable[[], bool]]:
    if should_cancel is None:
        return None
    if hasattr(should_cancel, 'is_set'):
        return should_cancel.is_set
    if callable(should_cancel):
        return should_cancel
    raise TypeError("should_cancel must be callable or expose is_set()")


def choose_record_path(document: Dict[str, Any]) -> tuple:
    """Pick the record path for an object input that was given none.

    Only an unambiguous document (exactly one list of records) is accepted.
    """
    candidates = find_record_paths(document)
    if len(candidates) == 1:
        logger.info("No record path given; using %s", format_record_path(candidates[0]))
        return candidates[0]
    if not candidates:
        raise PathNotFound("Object input contains no list of records; a record path is required.")
    listed = ', '.join(format_record_path(c) for c in candidates)
    raise PathNotFound(f"A record path is required; candidates are: {listed}")


class Extraction:
    """Lazy, restartable sequence of records drawn from a detected input.

    Object-shaped inputs resolve their record path and metadata up front, so
    path errors surface when the extraction is created. Line-delimited inputs
    parse one line per record pulled.
    """

    def __init__(self, detected: DetectedInput, options: Optional[LoaderOptions] = None, should_cancel=None):
        self.detected = detected
        self.options = options or LoaderOptions()
        self.report = ExtractionReport()
        self._complete = False
        self._should_cancel = _cancel_check(should_cancel)
        self.record_path: Optional[tuple] = None
        self.metadata: Dict[str, Any] = {}
        self._items: List[Any] = []

        if isinstance(detected, ObjectInput):
            self._resolve_object(detected)
        elif isinstance(detected, ArrayInput):
            self._items = detected.items
            self._warn_ignored_options()
        elif isinstance(detected, LineDelimitedInput):
            self._warn_ignored_options()
        else:
            raise TypeError(f"Unsupported input: {detected!r}")

    @property
    def shape(self) -> Shape:
        return self.detected.shape

    @property
    def origin(self) -> str:
        return self.detected.origin

    def _warn_ignored_options(self):
        if self.options.record_path is not None or self.options.metadata_keys:
            logger.warning(
                "%s: record_path and metadata_keys only apply to object input; ignoring them for %s input",
                self.origin,
                self.shape.value,
            )

    def _resolve_object(self, detected: ObjectInput):
        path = self.options.record_path
        if path is None:
            path = choose_record_path(detected.document)
        self.record_path = tuple(path)
        self._items = resolve_record_list(detected.document, self.record_path)
        self.metadata = select_metadata(detected.document, self.options.metadata_keys)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        # Once a pass has run to the end the report is final; later passes
        # re-read the same records without recounting or re-logging skips.
        replay = self._complete
        if not replay:
            self.report = ExtractionReport()
        if isinstance(self.detected, LineDelimitedInput):
            records = self._iter_lines(record_skips=not replay)
        elif isinstance(self.detected, ObjectInput):
            records = self._iter_object_records()
        else:
            records = self._iter_array_records()

        produced = 0
        for record in records:
            if self._should_cancel is not None and self._should_cancel():
                raise ExtractionCancelled(
                    f"{self.origin}: extraction cancelled after {produced} records"
                )
            produced += 1
            if not replay:
                self.report.records += 1
            yield record

        if replay:
            return
        self._complete = True
        if self.report.skipped_lines:
            logger.warning(
                "%s: skipped %d malformed line(s): %s",
                self.origin,
                self.report.skipped_lines,
                ', '.join(str(n) for n in self.report.skipped_line_numbers),
            )

    def _iter_lines(self, record_skips: bool = True) -> Iterator[Dict[str, Any]]:
        strict = self.options.strict
        lines = iter(self.detected.lines)
        try:
            for number, text in lines:
                if not text.strip():
                    continue
                try:
                    value = json.loads(text)
                except json.JSONDecodeError as exc:
                    if strict:
                        raise MalformedInput(exc.msg, self.origin, number) from exc
                    if record_skips:
                        logger.warning("%s:%d: skipping malformed line: %s", self.origin, number, exc.msg)
                        self.report.skipped_lines += 1
                        self.report.skipped_line_numbers.append(number)
                    continue
                if not isinstance(value, dict):
                    raise SchemaMismatch(
                        f"{self.origin}:{number}: line is {json_type_name(value)}, expected object"
                    )
                yield value
        except UnicodeDecodeError as exc:
            raise MalformedInput(f"input is not valid UTF-8: {exc}", self.origin) from exc
        finally:
            close = getattr(lines, 'close', None)
            if close is not None:
                close()

    def _iter_array_records(self) -> Iterator[Dict[str, Any]]:
        for index, item in enumerate(self._items):
            if not isinstance(item, dict):
                raise SchemaMismatch(
                    f"{self.origin}: array element {index} is {json_type_name(item)}, expected object"
                )
            yield item

    def _iter_object_records(self) -> Iterator[Dict[str, Any]]:
        overwrite = self.options.metadata_conflict == OVERWRITE
        path = format_record_path(self.record_path)
        for index, item in enumerate(self._items):
            if not isinstance(item, dict):
                raise SchemaMismatch(
                    f"{self.origin}: element {index} under {path} is {json_type_name(item)}, expected object"
                )
            record = dict(item)
            for key, value in self.metadata.items():
                if overwrite or key not in record:
                    record[key] = deepcopy(value)
            yield record


def extract_records(detected: DetectedInput, options: Optional[LoaderOptions] = None, should_cancel=None) -> Extraction:
    """Build the record sequence for a detected input."""
    return Extraction(detected, options, should_cancel)
