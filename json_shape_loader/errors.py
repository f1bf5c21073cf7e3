from __future__ import annotations

from typing import Optional, Sequence


class JSONShapeError(ValueError):
    """Base class for every failure raised while loading a JSON file."""


class MalformedInput(JSONShapeError):
    """A line, or the whole input, is not valid JSON."""

    def __init__(self, message: str, origin: Optional[str] = None, line_number: Optional[int] = None):
        self.origin = origin
        self.line_number = line_number
        where = origin or '<input>'
        if line_number is not None:
            where = f"{where}:{line_number}"
        super().__init__(f"{where}: {message}")


class SchemaMismatch(JSONShapeError):
    """A value expected to be a mapping or an array is something else."""


class PathNotFound(JSONShapeError, KeyError):
    """A record path or metadata key does not resolve inside the document."""

    def __init__(self, message: str, path: Sequence[str] = (), missing: Optional[str] = None):
        self.path = tuple(path)
        self.missing = missing
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ''


class ExtractionCancelled(JSONShapeError):
    """The caller asked extraction to stop between two records."""
