"""Shared pytest fixtures for cascadewind tests."""

from __future__ import annotations

import pytest

from cascadewind.core.reporter import Reporter
from cascadewind.core.variables import ResolutionContext, VariableDefinition, VariableRegistry


@pytest.fixture
def reporter() -> Reporter:
    """Return a silent reporter."""
    return Reporter(silent=True)


@pytest.fixture
def registry(reporter: Reporter) -> VariableRegistry:
    """Return an empty registry wired to the silent reporter."""
    return VariableRegistry(reporter=reporter)


@pytest.fixture
def define():
    """Return a factory that builds definitions with increasing source order."""
    counter = iter(range(1, 10_000))

    def _define(
        name: str,
        value: str,
        selector: str | None = None,
        qualifiers: tuple[str, ...] = (),
    ) -> VariableDefinition:
        return VariableDefinition.from_declaration(
            name, value, selector=selector, source_order=next(counter), qualifiers=qualifiers
        )

    return _define


@pytest.fixture
def root_context() -> ResolutionContext:
    return ResolutionContext(selector=".test")
