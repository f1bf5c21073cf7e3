from __future__ import annotations

import csv
import json
import logging
from itertools import islice
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

import pandas as pd

from .paths import join_column

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a column the record never had, as opposed to a JSON null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<absent>'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


def flatten_record(record: Dict[str, Any], separator: str = '.', parent: str = '') -> Dict[str, Any]:
    """Flatten nested objects into `parent<sep>child` columns.

    Lists are kept whole in a single column. An empty nested object is kept
    as its own value so the key is not lost.
    """
    flat: Dict[str, Any] = {}
    for key, value in record.items():
        column = join_column(parent, key, separator)
        if isinstance(value, dict) and value:
            flat.update(flatten_record(value, separator, column))
        else:
            flat[column] = value
    return flat


def _cell(value: Any, absent: str, null: str) -> Any:
    if value is ABSENT:
        return absent
    if value is None:
        return null
    if isinstance(value, list):
        if all(isinstance(v, (str, int, float, bool)) or v is None for v in value):
            return ", ".join(["" if v is None else str(v) for v in value])
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return value


class Table:
    """Rows with a consistent column set, produced lazily from records.

    The column set takes one pass over the records; rows take another. The
    records must therefore be re-iterable; a one-shot iterator is
    materialised into a list first.
    """

    def __init__(self, records: Iterable[Dict[str, Any]], separator: str = '.'):
        if iter(records) is records:
            logger.debug("materialising one-shot record iterator")
            records = list(records)
        self.records = records
        self.separator = separator
        self._columns: Optional[List[str]] = None

    @property
    def extraction(self):
        return self.records if hasattr(self.records, 'report') else None

    @property
    def shape(self):
        extraction = self.extraction
        return extraction.shape if extraction is not None else None

    @property
    def origin(self) -> Optional[str]:
        extraction = self.extraction
        return extraction.origin if extraction is not None else None

    @property
    def report(self):
        extraction = self.extraction
        return extraction.report if extraction is not None else None

    @property
    def columns(self) -> List[str]:
        if self._columns is None:
            seen: Dict[str, None] = {}
            for record in self.records:
                for column in flatten_record(record, self.separator):
                    seen.setdefault(column, None)
            self._columns = list(seen)
        return list(self._columns)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        columns = self.columns
        for record in self.records:
            flat = flatten_record(record, self.separator)
            yield {c: flat.get(c, ABSENT) for c in columns}

    def head(self, limit: int = 3) -> List[Dict[str, Any]]:
        return list(islice(iter(self), max(1, int(limit))))

    def to_records(self) -> List[Dict[str, Any]]:
        return list(self)

    def to_dataframe(self, absent: Any = pd.NA) -> pd.DataFrame:
        columns = self.columns
        rows = [[absent if v is ABSENT else v for v in row.values()] for row in self]
        return pd.DataFrame(rows, columns=columns)

    def write_csv(self, fh: TextIO, absent: str = '', null: str = '') -> int:
        """Write the table as CSV; return the number of data rows written."""
        writer = csv.DictWriter(fh, fieldnames=self.columns)
        writer.writeheader()
        count = 0
        for row in self:
            writer.writerow({k: _cell(v, absent, null) for k, v in row.items()})
            count += 1
        return count

    def write_json(self, fh: TextIO) -> int:
        """Write the table as a JSON array; absent columns are left out of each row."""
        count = 0
        fh.write('[')
        for row in self:
            fh.write(',\n  ' if count else '\n  ')
            fh.write(json.dumps({k: v for k, v in row.items() if v is not ABSENT}, ensure_ascii=False))
            count += 1
        fh.write('\n]\n' if count else ']\n')
        return count


def normalize(records: Iterable[Dict[str, Any]], separator: str = '.') -> Table:
    """Turn records into a Table of flat rows sharing one column set."""
    return Table(records, separator)
