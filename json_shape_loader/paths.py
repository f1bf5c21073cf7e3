from __future__ import annotations

from typing import Any, Iterable, List, Tuple

ROOT = '(root)'


def escape_path_segment(segment: Any, sep: str = '.') -> str:
    """Escape a single key segment for joined-path representation.

    - The separator is escaped with a backslash so keys like 'gpt-3.5-turbo'
      remain one segment.
    - Backslashes are escaped as '\\\\' to preserve round-tripping.
    """
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace('\\', '\\\\').replace(sep, '\\' + sep)


def unescape_path_segment(segment: str) -> str:
    if segment is None:
        return ''
    out: List[str] = []
    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == '\\' and i + 1 < len(segment):
            out.append(segment[i + 1])
            i += 2
        else:
            out.append(ch)
            i += 1
    return ''.join(out)


def split_path(path: str, sep: str = '.') -> List[str]:
    """Split a joined path on unescaped separators and unescape each segment."""
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)

    parts: List[str] = []
    buf: List[str] = []
    escaping = False

    for ch in path:
        if escaping:
            # Keep the escape pair so unescape_path_segment can process it.
            buf.append('\\')
            buf.append(ch)
            escaping = False
            continue

        if ch == '\\':
            escaping = True
            continue
        if ch == sep:
            parts.append(unescape_path_segment(''.join(buf)))
            buf = []
            continue
        buf.append(ch)

    if escaping:
        # Trailing backslash; treat as literal.
        buf.append('\\')

    parts.append(unescape_path_segment(''.join(buf)))
    return [p for p in parts if p != '']


def join_path(segments: Iterable[Any], sep: str = '.') -> str:
    return sep.join(escape_path_segment(s, sep) for s in segments)


def join_column(parent: str, key: Any, sep: str = '.') -> str:
    """Column name for `key` nested under an already-joined `parent`."""
    child = escape_path_segment(key, sep)
    return f"{parent}{sep}{child}" if parent else child


def parse_record_path(path: Any) -> Tuple[str, ...]:
    """Normalise a record path given as a dot-path string or a key sequence.

    '(root)' and '' both mean the empty path.
    """
    if path is None or path == '' or path == ROOT:
        return ()
    if isinstance(path, str):
        return tuple(split_path(path))
    return tuple(str(p) for p in path)


def format_record_path(path: Iterable[str]) -> str:
    path = tuple(path)
    return join_path(path) if path else ROOT
