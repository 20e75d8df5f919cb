"""Shared fakes for the filter engine tests.

No Elasticsearch or Redis required: the registry is the bundled JSON file,
time comes from a manual clock and searches hit a recording executor.
"""

from typing import Any

import pytest

from prospect_filters.adapters.json_registry import InMemoryRegistry, JsonFileRegistry
from prospect_filters.adapters.memory_cache import InMemoryValueCache
from prospect_filters.config.runtime import RuntimeSettings
from prospect_filters.domain.catalog import FilterCatalog


class FakeClock:
    """Manual clock: time only moves when advance() is called."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds


class FakeExecutor:
    """Records every search and returns a canned response."""

    def __init__(self, response: dict[str, Any] | None = None) -> None:
        self.response = response or {"hits": {"total": {"value": 0}, "hits": []}}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((index, body))
        return self.response


@pytest.fixture
def registry_entries() -> list[dict[str, Any]]:
    return JsonFileRegistry().load()


@pytest.fixture
def catalog(registry_entries) -> FilterCatalog:
    return FilterCatalog.from_entries(registry_entries)


@pytest.fixture
def registry(registry_entries) -> InMemoryRegistry:
    return InMemoryRegistry(registry_entries)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def value_cache(fake_clock) -> InMemoryValueCache:
    return InMemoryValueCache(fake_clock)


@pytest.fixture
def settings() -> RuntimeSettings:
    return RuntimeSettings(_env_file=None)
