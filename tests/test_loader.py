#!/usr/bin/env python3
"""Integration tests: file in, rows out."""

import json

import pytest

from json_shape_loader import (
    ABSENT,
    MalformedInput,
    PathNotFound,
    Shape,
    load_table,
)
from json_shape_loader.config import LoaderOptions
from json_shape_loader.schema_utils import find_metadata_keys, find_record_paths


class TestLoadTable:
    """The three shapes end to end."""

    def test_bare_array(self, array_file):
        table = load_table(array_file)
        assert table.shape is Shape.ARRAY
        assert table.columns == ["id", "name"]
        assert table.to_records() == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

    def test_wrapped_object_with_metadata(self, wrapped_file):
        table = load_table(wrapped_file, record_path=["records"], metadata_keys={"project", "version"})
        assert table.shape is Shape.OBJECT
        assert table.to_records() == [
            {"id": 1, "name": "Alice", "project": "demo", "version": "1.0"},
            {"id": 2, "name": "Bob", "project": "demo", "version": "1.0"},
        ]

    def test_json_lines_flattened(self, jsonl_file):
        table = load_table(jsonl_file)
        assert table.shape is Shape.LINE_DELIMITED
        assert table.columns == ["id", "kind", "meta.x", "meta.y"]
        rows = table.to_records()
        assert rows[1] == {"id": 2, "kind": "click", "meta.x": 10, "meta.y": 20}
        assert rows[2]["meta.x"] is ABSENT

    def test_missing_record_path(self, wrapped_file):
        with pytest.raises(PathNotFound):
            load_table(wrapped_file, record_path="nope")

    def test_strict_malformed_line(self, broken_jsonl_file):
        table = load_table(broken_jsonl_file)
        with pytest.raises(MalformedInput):
            table.to_records()

    def test_lenient_malformed_line(self, broken_jsonl_file):
        table = load_table(broken_jsonl_file, on_malformed_line="lenient")
        assert table.to_records() == [{"id": 1}, {"id": 3}]
        assert table.report.skipped_lines == 1

    def test_report_complete_after_head(self, broken_jsonl_file, caplog):
        table = load_table(broken_jsonl_file, on_malformed_line="lenient")
        with caplog.at_level("WARNING"):
            assert table.head(1) == [{"id": 1}]
            assert table.report.skipped_lines == 1
            table.to_records()
        assert table.report.skipped_lines == 1
        assert caplog.text.count("skipping malformed line") == 1

    def test_single_line_jsonl_file(self, write_file):
        table = load_table(write_file('{"id": 1, "name": "Alice"}\n', name="one.jsonl"))
        assert table.shape is Shape.LINE_DELIMITED
        assert table.to_records() == [{"id": 1, "name": "Alice"}]

    def test_empty_record_path_auto_selects(self, wrapped_file):
        table = load_table(wrapped_file, record_path="")
        assert table.to_records() == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

    def test_options_object(self, broken_jsonl_file):
        table = load_table(broken_jsonl_file, LoaderOptions(on_malformed_line="lenient"))
        assert len(table.to_records()) == 2

    def test_environment_policy(self, broken_jsonl_file, monkeypatch):
        monkeypatch.setenv("JSON_SHAPE_ON_MALFORMED_LINE", "lenient")
        assert len(load_table(broken_jsonl_file).to_records()) == 2

    def test_dataframe_hand_off(self, wrapped_file):
        df = load_table(wrapped_file, metadata_keys=["project"]).to_dataframe()
        assert df.shape == (2, 3)
        assert df["project"].tolist() == ["demo", "demo"]


class TestSchemaHelpers:
    """Suggestions offered for wrapped objects."""

    def test_find_record_paths(self):
        doc = {
            "meta": {"total": 2},
            "records": [{"a": 1}],
            "nested": {"rows": [{"b": 2}], "empty": []},
            "scalars": [1, 2],
        }
        assert find_record_paths(doc) == [("records",), ("nested", "rows")]

    def test_find_record_paths_not_object(self):
        assert find_record_paths([{"a": 1}]) == []

    def test_find_metadata_keys(self, wrapped_file):
        doc = json.loads(wrapped_file.read_text(encoding="utf-8"))
        assert find_metadata_keys(doc) == ["project", "version"]
