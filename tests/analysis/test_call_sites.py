"""Tests for render and layout call-site extraction."""

from __future__ import annotations

from viewdeps import parse
from viewdeps.analysis import (
    AnalysisConfig,
    CallKind,
    CallSiteCollector,
    extract_render_calls,
)
from viewdeps.nodes import string_value


def methods(source: str, config: AnalysisConfig | None = None) -> dict[CallKind, list[str]]:
    calls = extract_render_calls(parse(source), config)
    return {kind: [call.method for call in group] for kind, group in calls.items()}


def first_arguments(source: str) -> list[str | None]:
    calls = extract_render_calls(parse(source))
    return [string_value(call.arguments[0]) for call in calls.get(CallKind.RENDER, [])]


class TestMatching:
    """Which calls count as render calls."""

    def test_render_and_render_to_string(self) -> None:
        assert methods("render 'a'\nrender_to_string 'b'") == {
            CallKind.RENDER: ["render", "render_to_string"],
        }

    def test_layout(self) -> None:
        assert methods("layout 'admin'") == {CallKind.LAYOUT: ["layout"]}

    def test_names_containing_render_do_not_match(self) -> None:
        assert methods("rendering 'it useless'\nsurrender 'to reason'") == {}

    def test_explicit_receiver_does_not_match(self) -> None:
        assert methods("view.render 'x'\nself.render('y')") == {}

    def test_bare_render_without_arguments_is_not_a_call(self) -> None:
        assert methods("render") == {}

    def test_empty_parens_are_a_call(self) -> None:
        calls = extract_render_calls(parse("render()"))
        assert calls[CallKind.RENDER][0].arguments == ()

    def test_custom_method_names(self) -> None:
        config = AnalysisConfig(render_methods=frozenset({"render", "render_cell"}))
        assert methods("render_cell 'a'\nrender_to_string 'b'", config) == {
            CallKind.RENDER: ["render_cell"],
        }


class TestOrdering:
    """Source order within groups, first-encounter order of groups."""

    def test_groups_in_first_encounter_order(self) -> None:
        calls = extract_render_calls(parse("layout 'a'\nrender 'b'\nlayout 'c'"))
        assert list(calls) == [CallKind.LAYOUT, CallKind.RENDER]
        assert len(calls[CallKind.LAYOUT]) == 2

    def test_top_to_bottom_left_to_right(self) -> None:
        source = "render 'a'; render 'b'\nrender 'c'"
        assert first_arguments(source) == ["a", "b", "c"]

    def test_nested_in_arguments_follows_parent(self) -> None:
        source = "render 'a', locals: {body: render('b')}\nrender 'c'"
        assert first_arguments(source) == ["a", "b", "c"]

    def test_nested_in_block_follows_parent(self) -> None:
        source = "render layout: 'box' do\n  render 'inner'\nend"
        calls = extract_render_calls(parse(source))[CallKind.RENDER]
        assert len(calls) == 2
        assert string_value(calls[1].arguments[0]) == "inner"

    def test_inside_control_flow_and_receiver_blocks(self) -> None:
        source = "if show\n  render 'a'\nend\n@posts.each do |post|\n  render 'b'\nend"
        assert first_arguments(source) == ["a", "b"]

    def test_inside_string_interpolation(self) -> None:
        assert first_arguments("\"#{render 'a'}\"") == ["a"]


class TestInvocation:
    """Recorded invocation details."""

    def test_arguments_and_line(self) -> None:
        calls = extract_render_calls(parse("x = 1\nrender 'form', post: @post"))
        (invocation,) = calls[CallKind.RENDER]
        assert invocation.kind is CallKind.RENDER
        assert invocation.lineno == 2
        assert len(invocation.arguments) == 2

    def test_collector_is_reusable(self) -> None:
        collector = CallSiteCollector()
        first = collector.collect(parse("render 'a'"))
        second = collector.collect(parse("render 'b'"))
        assert len(first[CallKind.RENDER]) == 1
        assert len(second[CallKind.RENDER]) == 1
        assert first is not second
