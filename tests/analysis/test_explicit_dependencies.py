"""Tests for explicit dependency annotations and wildcard expansion."""

from __future__ import annotations

import logging

import pytest

from viewdeps import DictViewPath, explicit_dependencies
from viewdeps.analysis.explicit import EXPLICIT_DEPENDENCY, resolve_directories


class TestAnnotations:
    """Plain annotation tokens."""

    def test_single_annotation(self) -> None:
        source = "<%# Template Dependency: shared/header %>"
        assert explicit_dependencies(source) == ["shared/header"]

    def test_annotation_without_render_calls(self) -> None:
        source = "<p>static</p>\n<%# Template Dependency: shared/header %>\n"
        assert explicit_dependencies(source) == ["shared/header"]

    def test_annotations_in_first_seen_order(self) -> None:
        source = (
            "<%# Template Dependency: b/two %>\n"
            "<%# Template Dependency: a/one %>\n"
            "<%# Template Dependency: b/two %>\n"
        )
        assert explicit_dependencies(source) == ["b/two", "a/one"]

    def test_ruby_comment(self) -> None:
        assert explicit_dependencies("# Template Dependency: shared/nav\nx = 1") == ["shared/nav"]

    def test_pattern_is_exact(self) -> None:
        assert explicit_dependencies("<%# template dependency: shared/header %>") == []
        assert explicit_dependencies("<%# Template Dependency:shared/header %>") == []

    def test_token_stops_at_whitespace(self) -> None:
        assert EXPLICIT_DEPENDENCY.findall("# Template Dependency: a/b %>") == ["a/b"]


class TestWildcards:
    """Directory wildcard expansion."""

    def test_expands_sorted_across_view_paths(self, view_paths) -> None:
        source = "<%# Template Dependency: shared/* %>"
        assert explicit_dependencies(source, view_paths) == [
            "shared/_footer",
            "shared/_header",
            "shared/_sidebar",
        ]

    def test_nested_directories_are_not_included(self, view_paths) -> None:
        source = "<%# Template Dependency: shared/nested/* %>"
        assert explicit_dependencies(source, view_paths) == ["shared/nested/_deep"]

    def test_without_view_paths_expands_to_nothing(self) -> None:
        assert explicit_dependencies("<%# Template Dependency: shared/* %>") == []

    def test_missing_view_paths_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="viewdeps.analysis.explicit"):
            explicit_dependencies("<%# Template Dependency: shared/* %>")
        assert "shared" in caplog.text

    def test_unknown_directory(self, view_paths) -> None:
        assert explicit_dependencies("# Template Dependency: nothing/*", view_paths) == []

    def test_wildcards_come_before_plain_tokens(self, view_paths) -> None:
        source = (
            "<%# Template Dependency: messages/show %>\n"
            "<%# Template Dependency: messages/* %>\n"
            "<%# Template Dependency: messages/_form %>\n"
        )
        assert explicit_dependencies(source, view_paths) == ["messages/_form", "messages/show"]

    def test_resolve_directories(self) -> None:
        view_paths = [DictViewPath(["a/x", "b/y", "a/w"])]
        assert resolve_directories(["a/*", "b/*"], view_paths) == ["a/w", "a/x", "b/y"]

    def test_resolve_directories_without_wildcards(self) -> None:
        assert resolve_directories([], None) == []
