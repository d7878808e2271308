"""Tests for source position recovery from JSON pointers."""

from __future__ import annotations

import pytest

from ocifkit.models.errors import SourcePosition
from ocifkit.parser.loader import DocumentLoader, split_pointer
from ocifkit.parser.locator import (
    ScanLocator,
    SpanLocator,
    find_position,
    locate,
    make_locator,
)
from tests.conftest import JSON5_DOCUMENT, MISSING_ID_DOCUMENT, SAMPLE_DOCUMENT, char_at

NESTED = """\
{
  "a": {
    "b": 1
  }
}
"""


class TestPointers:
    def test_root_pointers(self) -> None:
        assert split_pointer("") == []
        assert split_pointer("/") == []

    def test_escaped_segments(self) -> None:
        assert split_pointer("/a~1b/c~0d/0") == ["a/b", "c~d", "0"]


class TestLocate:
    def test_value_not_key(self) -> None:
        pos = locate('{"a": {"b": 1}}', "/a/b")
        assert pos == SourcePosition(line=1, column=13)
        assert char_at('{"a": {"b": 1}}', pos.line, pos.column) == "1"

    def test_multiline_value(self) -> None:
        pos = locate(NESTED, "/a/b")
        assert (pos.line, pos.column) == (3, 10)

    def test_object_value_points_at_brace(self) -> None:
        pos = locate(NESTED, "/a")
        assert char_at(NESTED, pos.line, pos.column) == "{"
        assert pos.line == 2

    def test_string_value_points_inside_quotes(self) -> None:
        pos = locate('{"name": "xyz"}', "/name")
        assert pos.column == 11
        assert char_at('{"name": "xyz"}', pos.line, pos.column) == "x"

    def test_array_index(self) -> None:
        text = '{"nodes": [{"id": "a"}, {"id": "b"}]}'
        pos = locate(text, "/nodes/1/id")
        assert char_at(text, pos.line, pos.column) == "b"

    def test_array_element(self) -> None:
        pos = locate(MISSING_ID_DOCUMENT, "/nodes/0")
        assert (pos.line, pos.column) == (4, 5)

    def test_nested_array_values(self) -> None:
        text = '{"grid": [[1, 2], [3, 4]]}'
        pos = locate(text, "/grid/1/0")
        assert char_at(text, pos.line, pos.column) == "3"

    def test_keys_after_nested_structures(self) -> None:
        pos = locate(SAMPLE_DOCUMENT, "/resources/0/representations/1/content")
        assert char_at(SAMPLE_DOCUMENT, pos.line, pos.column) == "E"
        assert "text/plain" in SAMPLE_DOCUMENT.split("\n")[pos.line - 1]

    def test_escaped_quotes_do_not_toggle_strings(self) -> None:
        text = '{"x\\"y": "a\\"b", "z": 5}'
        pos = locate(text, "/z")
        assert char_at(text, pos.line, pos.column) == "5"

    def test_escaped_key_is_matched(self) -> None:
        text = '{"x\\"y": 7}'
        pos = locate(text, '/x"y')
        assert char_at(text, pos.line, pos.column) == "7"

    def test_duplicate_keys_first_match_wins(self) -> None:
        text = '{"a": 1, "a": 2}'
        pos = locate(text, "/a")
        assert char_at(text, pos.line, pos.column) == "1"

    def test_root_maps_to_start(self) -> None:
        assert locate(NESTED, "/") == SourcePosition(line=1, column=1)
        assert locate(NESTED, "") == SourcePosition(line=1, column=1)

    def test_missing_path_falls_back(self) -> None:
        assert locate(NESTED, "/a/zzz") == SourcePosition(line=1, column=1)

    def test_find_position_reports_misses(self) -> None:
        assert find_position(NESTED, "/a/zzz") is None
        assert find_position("", "/a") is None
        assert find_position(NESTED, "/") == SourcePosition()
        assert ScanLocator(NESTED).find("/nope") is None

    def test_empty_and_blank_text(self) -> None:
        assert locate("", "/a") == SourcePosition(line=1, column=1)
        assert locate("  \n\t\n", "/a") == SourcePosition(line=1, column=1)

    def test_top_level_array(self) -> None:
        text = "[10, 20, 30]"
        pos = locate(text, "/2")
        assert char_at(text, pos.line, pos.column) == "3"


class TestLocateJSON5:
    def test_comment_and_unquoted_keys(self) -> None:
        pos = locate(JSON5_DOCUMENT, "/ocif")
        assert pos.line == 3
        assert char_at(JSON5_DOCUMENT, pos.line, pos.column) == "h"

    def test_single_quoted_values_in_arrays(self) -> None:
        pos = locate(JSON5_DOCUMENT, "/nodes/1/text")
        assert char_at(JSON5_DOCUMENT, pos.line, pos.column) == "W"

    def test_block_comment_skipped(self) -> None:
        text = '{/* "a": 0, */ "a": 9}'
        pos = locate(text, "/a")
        assert char_at(text, pos.line, pos.column) == "9"


class TestSpanLocator:
    def test_source_map_paths(self, loader: DocumentLoader) -> None:
        source_map = loader.source_map(NESTED)
        assert "/a" in source_map.paths
        assert "/a/b" in source_map.paths

    def test_span_matches_scan_for_plain_json(self) -> None:
        locator = SpanLocator(NESTED)
        assert locator.locate("/a/b") == SourcePosition(line=3, column=10)

    def test_span_array_item(self) -> None:
        locator = SpanLocator(MISSING_ID_DOCUMENT)
        pos = locator.locate("/nodes/0")
        assert (pos.line, pos.column) == (4, 5)

    def test_root(self) -> None:
        assert SpanLocator(NESTED).locate("/") == SourcePosition()

    def test_falls_back_to_scan_when_map_unavailable(self) -> None:
        text = '{"a": 1, "a": 2}'
        pos = SpanLocator(text).locate("/a")
        assert char_at(text, pos.line, pos.column) == "1"

    def test_falls_back_to_scan_for_unknown_path(self) -> None:
        assert SpanLocator(NESTED).locate("/nope") == SourcePosition()
        assert SpanLocator(NESTED).find("/nope") is None


class TestMakeLocator:
    def test_strategies(self) -> None:
        assert isinstance(make_locator("scan", NESTED), ScanLocator)
        assert isinstance(make_locator("span", NESTED), SpanLocator)

    def test_unknown_strategy(self) -> None:
        with pytest.raises(ValueError, match="Unknown locator"):
            make_locator("regex", NESTED)
