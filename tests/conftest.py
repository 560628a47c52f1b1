"""Shared test fixtures for the dicecup test suite."""

from __future__ import annotations

import pytest

from dicecup.tracing import MemoryTracer
from tests.fakes import FixedRandomSource


@pytest.fixture
def lowest() -> FixedRandomSource:
    """A source that always rolls the lowest face."""
    return FixedRandomSource(-(10**9))


@pytest.fixture
def highest() -> FixedRandomSource:
    """A source that always rolls the highest face."""
    return FixedRandomSource(10**9)


@pytest.fixture
def tracer() -> MemoryTracer:
    return MemoryTracer()
