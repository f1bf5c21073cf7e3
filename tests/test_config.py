#!/usr/bin/env python3
"""Unit tests for loader options and path helpers."""

import pytest

from json_shape_loader.config import LoaderOptions, load_options
from json_shape_loader.paths import (
    ROOT,
    format_record_path,
    join_column,
    parse_record_path,
    split_path,
)


class TestLoaderOptions:
    """Validation and coercion on construction."""

    def test_defaults(self):
        options = LoaderOptions()
        assert options.record_path is None
        assert options.metadata_keys == ()
        assert options.strict
        assert options.metadata_conflict == "overwrite"
        assert options.separator == "."

    def test_record_path_from_string(self):
        """Dot-path strings become key tuples; '(root)' and '' leave the path unset."""
        assert LoaderOptions(record_path="data.items").record_path == ("data", "items")
        assert LoaderOptions(record_path=ROOT).record_path is None
        assert LoaderOptions(record_path="").record_path is None
        assert LoaderOptions(record_path=["records"]).record_path == ("records",)

    def test_metadata_keys_from_set_are_sorted(self):
        """Sets carry no order, so keys are sorted for reproducible rows."""
        assert LoaderOptions(metadata_keys={"version", "project"}).metadata_keys == ("project", "version")

    def test_single_metadata_key_string(self):
        assert LoaderOptions(metadata_keys="project").metadata_keys == ("project",)

    @pytest.mark.parametrize("kwargs", [
        {"on_malformed_line": "ignore"},
        {"metadata_conflict": "merge"},
        {"separator": ""},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            LoaderOptions(**kwargs)


class TestLoadOptions:
    """Defaults, then environment, then keyword overrides."""

    def test_environment_overrides_defaults(self):
        env = {"JSON_SHAPE_ON_MALFORMED_LINE": "LENIENT", "JSON_SHAPE_SEPARATOR": "/"}
        options = load_options(environ=env)
        assert options.on_malformed_line == "lenient"
        assert options.separator == "/"

    def test_keywords_override_environment(self):
        env = {"JSON_SHAPE_METADATA_CONFLICT": "keep"}
        options = load_options(environ=env, metadata_conflict="overwrite", record_path="rows")
        assert options.metadata_conflict == "overwrite"
        assert options.record_path == ("rows",)

    def test_explicit_base_ignores_environment(self):
        env = {"JSON_SHAPE_ON_MALFORMED_LINE": "lenient"}
        base = LoaderOptions(on_malformed_line="strict")
        assert load_options(base, environ=env).strict

    def test_invalid_environment_value(self):
        with pytest.raises(ValueError):
            load_options(environ={"JSON_SHAPE_METADATA_CONFLICT": "sometimes"})


class TestPaths:
    """Dot-path parsing and column joining."""

    def test_split_with_escaped_dot(self):
        assert split_path("a.gpt-3\\.5.b") == ["a", "gpt-3.5", "b"]

    def test_parse_record_path_empty_forms(self):
        assert parse_record_path(None) == ()
        assert parse_record_path("") == ()
        assert parse_record_path(ROOT) == ()

    def test_format_round_trip(self):
        path = ("data", "v1.2", "rows")
        assert parse_record_path(format_record_path(path)) == path
        assert format_record_path(()) == ROOT

    def test_join_column_escapes_separator(self):
        assert join_column("", "a") == "a"
        assert join_column("user", "first.name") == "user.first\\.name"
        assert join_column("a", "b", "__") == "a__b"
