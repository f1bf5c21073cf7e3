#!/usr/bin/env python3
"""Shared pytest fixtures for the json-shape-loader test suite."""

import json
import pathlib

import pytest

PEOPLE = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def array_file(tmp_path) -> pathlib.Path:
    """A pretty-printed bare array of two records."""
    json_file = tmp_path / "people.json"
    json_file.write_text(json.dumps(PEOPLE, indent=2), encoding="utf-8")
    return json_file


@pytest.fixture
def wrapped_file(tmp_path) -> pathlib.Path:
    """A wrapped object with metadata next to the record list."""
    json_file = tmp_path / "wrapped.json"
    payload = {"project": "demo", "version": "1.0", "records": PEOPLE}
    json_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return json_file


@pytest.fixture
def jsonl_file(tmp_path) -> pathlib.Path:
    """Three JSON Lines records with blank lines sprinkled in."""
    json_file = tmp_path / "events.jsonl"
    json_file.write_text(
        '{"id": 1, "kind": "open"}\n'
        '\n'
        '{"id": 2, "kind": "click", "meta": {"x": 10, "y": 20}}\n'
        '   \n'
        '{"id": 3, "kind": "close"}\n',
        encoding="utf-8",
    )
    return json_file


@pytest.fixture
def broken_jsonl_file(tmp_path) -> pathlib.Path:
    """JSON Lines with one malformed line in the middle (line 2)."""
    json_file = tmp_path / "broken.jsonl"
    json_file.write_text(
        '{"id": 1}\n'
        '{"id": 2,\n'
        '{"id": 3}\n',
        encoding="utf-8",
    )
    return json_file


@pytest.fixture
def write_file(tmp_path):
    """Factory writing arbitrary text to a temp file and returning its path."""
    def _write(text: str, name: str = "input.json") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
