"""Pytest configuration and fixtures for viewdeps tests."""

from collections.abc import Callable

import pytest

from viewdeps import (
    DictViewPath,
    HandlerRegistry,
    RenderParser,
    Template,
    TrackerRegistry,
)
from viewdeps.analysis import AnalysisConfig, RenderDependency


@pytest.fixture
def handlers():
    """Create a HandlerRegistry with the erb and ruby handlers."""
    return HandlerRegistry.default()


@pytest.fixture
def registry(handlers):
    """Create a TrackerRegistry with RenderTracker registered for erb."""
    return TrackerRegistry.default(handlers)


@pytest.fixture
def erb_template(handlers) -> Callable[[str], Template]:
    """Factory for ERB templates."""

    def make(source: str) -> Template:
        return Template(source, handlers.for_extension("erb"))

    return make


@pytest.fixture
def view_paths():
    """View paths listing a few shared templates across two providers."""
    return [
        DictViewPath(["shared/_header", "shared/_footer", "messages/_form"]),
        DictViewPath(["shared/_sidebar", "shared/_header", "shared/nested/_deep"]),
    ]


def render_calls(name: str, code: str, from_controller: bool = False) -> list[RenderDependency]:
    """Resolve the render calls of ``code`` analyzed as template ``name``."""
    config = AnalysisConfig(from_controller=from_controller)
    return RenderParser(name, code, config).render_calls()


def virtual_paths(name: str, code: str, from_controller: bool = False) -> list[str]:
    """Virtual paths only, in order."""
    return [call.virtual_path for call in render_calls(name, code, from_controller)]
