from __future__ import annotations

import io
import logging
import os
from typing import Any, Iterator, Tuple

logger = logging.getLogger(__name__)

ENCODING = 'utf-8-sig'


def _is_stream(source: Any) -> bool:
    return hasattr(source, 'read')


def _source_path(source: Any):
    if isinstance(source, (str, os.PathLike)):
        return source
    # Uploaded files (e.g. from Gradio) expose the temp path as `.name`.
    return source.name if hasattr(source, 'name') else source


def source_origin(source: Any) -> str:
    """Human-readable identifier for a path, stream or uploaded file."""
    if source is None:
        return '<none>'
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, 'name', None)
    if isinstance(name, str) and name:
        return name
    return '<stream>'


def prepare_source(source: Any) -> Any:
    """Return a source that can be read more than once.

    Paths are reopened on every read. Seekable streams are rewound.
    Anything else is buffered in memory once.
    """
    if source is None:
        raise ValueError("No file uploaded.")
    if not _is_stream(source):
        return source
    seekable = getattr(source, 'seekable', None)
    if callable(seekable) and seekable():
        return source
    logger.debug("buffering non-seekable stream %s", source_origin(source))
    content = source.read()
    buffered = io.BytesIO(content) if isinstance(content, bytes) else io.StringIO(content)
    name = getattr(source, 'name', None)
    if isinstance(name, str):
        buffered.name = name
    return buffered


def _decode(chunk, first: bool) -> str:
    if isinstance(chunk, bytes):
        return chunk.decode(ENCODING if first else 'utf-8')
    if first and chunk.startswith('\ufeff'):
        return chunk[1:]
    return chunk


def iter_lines(source: Any) -> Iterator[Tuple[int, str]]:
    """Yield (line_number, text) pairs, 1-based, newline stripped.

    Each call starts again from the beginning of the source.
    """
    if _is_stream(source):
        if hasattr(source, 'seek'):
            source.seek(0)
        for number, raw in enumerate(source, start=1):
            yield number, _decode(raw, number == 1).rstrip('\r\n')
        return

    with open(_source_path(source), 'r', encoding=ENCODING) as f:
        for number, raw in enumerate(f, start=1):
            yield number, raw.rstrip('\r\n')


def read_text(source: Any) -> str:
    """Read the whole source as text."""
    if _is_stream(source):
        if hasattr(source, 'seek'):
            source.seek(0)
        content = source.read()
        return _decode(content, True)

    with open(_source_path(source), 'r', encoding=ENCODING) as f:
        return f.read()
