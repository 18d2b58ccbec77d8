"""Property-based tests for the analysis pipeline.

Uses hypothesis to verify invariants that must hold for *all* inputs:

- Arbitrary input never crashes the parser or analyzer
- Analysis is deterministic (same input, same ordered output)
- A call with an unknown option contributes no dependencies
- A call with both object and collection contributes no dependencies
- Well-formed partial renders resolve to one underscored dependency
- Explicit annotations always appear in the result
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st
from strategies import (
    arbitrary_source,
    directory_name,
    explicit_annotation,
    render_call,
    ruby_soup,
    segment,
    template_name,
    unknown_option,
    wildcard_annotation,
)

from viewdeps import (
    DictViewPath,
    HandlerRegistry,
    Parser,
    RenderParser,
    Template,
    TrackerRegistry,
)
from viewdeps.analysis import AnalysisConfig


class TestNoCrash:
    """Robustness on arbitrary input."""

    @given(source=st.one_of(arbitrary_source, ruby_soup))
    @settings(max_examples=300)
    def test_parser_never_raises(self, source: str) -> None:
        parser = Parser(source)
        program = parser.parse()
        assert isinstance(program.body, tuple)
        assert all(error.lineno >= 1 for error in parser.errors)

    @given(source=ruby_soup, from_controller=st.booleans())
    @settings(max_examples=300)
    def test_analysis_never_raises(self, source: str, from_controller: bool) -> None:
        config = AnalysisConfig(from_controller=from_controller)
        for call in RenderParser("posts/index", source, config).render_calls():
            assert isinstance(call.locals_keys, tuple)

    @given(source=arbitrary_source)
    @settings(max_examples=200)
    def test_find_dependencies_never_raises(self, source: str) -> None:
        handlers = HandlerRegistry.default()
        registry = TrackerRegistry.default(handlers)
        template = Template(source, handlers.for_extension("erb"))
        assert isinstance(registry.find_dependencies("posts/index", template), list)


class TestDeterminism:
    """Re-running analysis gives identical results."""

    @given(source=ruby_soup)
    @settings(max_examples=200)
    def test_render_calls_idempotent(self, source: str) -> None:
        first = RenderParser("posts/index", source).render_calls()
        second = RenderParser("posts/index", source).render_calls()
        assert first == second

    @given(
        calls=st.lists(render_call, max_size=5),
        annotations=st.lists(st.one_of(explicit_annotation, wildcard_annotation), max_size=4),
        listed=st.lists(template_name, max_size=8),
    )
    @settings(max_examples=100)
    def test_find_dependencies_idempotent(
        self, calls: list[str], annotations: list[str], listed: list[str]
    ) -> None:
        handlers = HandlerRegistry.default()
        registry = TrackerRegistry.default(handlers)
        source = "\n".join(annotations + [f"<%= {call} %>" for call in calls])
        template = Template(source, handlers.for_extension("erb"))
        view_paths = [DictViewPath(listed)]
        first = registry.find_dependencies("posts/index", template, view_paths)
        second = registry.find_dependencies("posts/index", template, view_paths)
        assert first == second
        assert len(first) == len(set(first))


class TestResolution:
    """Invariants of render-call resolution."""

    @given(call=render_call)
    @settings(max_examples=200)
    def test_partial_render_resolves_once(self, call: str) -> None:
        (dependency,) = RenderParser("posts/index", call).render_calls()
        last = dependency.virtual_path.rpartition("/")[2]
        assert last.startswith("_")

    @given(call=render_call, key=unknown_option)
    @settings(max_examples=200)
    def test_unknown_option_rejected(self, call: str, key: str) -> None:
        source = f"{call}, {key}: 1"
        assert RenderParser("posts/index", source).render_calls() == []

    @given(name=template_name, local=st.one_of(st.none(), segment), first=st.booleans())
    @settings(max_examples=200)
    def test_object_and_collection_exclusive(
        self, name: str, local: str | None, first: bool
    ) -> None:
        options = ["object: @item", "collection: @items"]
        if first:
            options.reverse()
        if local is not None:
            options.append(f"as: :{local}")
        source = f"render partial: '{name}', " + ", ".join(options)
        assert RenderParser("posts/index", source).render_calls() == []

    @given(name=template_name, from_controller=st.booleans())
    @settings(max_examples=100)
    def test_at_most_three_dependencies(self, name: str, from_controller: bool) -> None:
        source = (
            f"render partial: '{name}', collection: @items, "
            "spacer_template: 'shared/hr', layout: 'box'"
        )
        config = AnalysisConfig(from_controller=from_controller)
        calls = RenderParser("posts/index", source, config).render_calls()
        assert 1 <= len(calls) <= 3


class TestExplicit:
    """Explicit annotations."""

    @given(name=template_name, calls=st.lists(render_call, max_size=3))
    @settings(max_examples=100)
    def test_annotation_always_present(self, name: str, calls: list[str]) -> None:
        handlers = HandlerRegistry.default()
        registry = TrackerRegistry.default(handlers)
        source = f"<%# Template Dependency: {name} %>\n" + "".join(
            f"<%= {call} %>" for call in calls
        )
        template = Template(source, handlers.for_extension("erb"))
        assert name in registry.find_dependencies("posts/index", template)

    @given(directory=directory_name, listed=st.lists(template_name, max_size=10))
    @settings(max_examples=100)
    def test_wildcard_sorted_and_filtered(self, directory: str, listed: list[str]) -> None:
        handlers = HandlerRegistry.default()
        registry = TrackerRegistry.default(handlers)
        template = Template(
            f"<%# Template Dependency: {directory}/* %>", handlers.for_extension("erb")
        )
        found = registry.find_dependencies("posts/index", template, [DictViewPath(listed)])
        assert found == sorted(found)
        assert all(path.rpartition("/")[0] == directory for path in found)
        assert found == sorted({p for p in listed if p.rpartition("/")[0] == directory})
