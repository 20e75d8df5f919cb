"""Immutable, id-indexed snapshot of the active filter definitions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from .definitions import FilterDefinition


class FilterCatalog:
    """Read-only view over filter definitions in registry order.

    Built once per registry load and swapped wholesale on refresh; nothing
    mutates a catalog after construction.
    """

    __slots__ = ("_ordered", "_by_id")

    def __init__(self, definitions: Iterable[FilterDefinition]) -> None:
        ordered: list[FilterDefinition] = []
        by_id: dict[str, FilterDefinition] = {}
        for definition in definitions:
            if not definition.active or definition.id in by_id:
                continue
            ordered.append(definition)
            by_id[definition.id] = definition
        self._ordered = tuple(ordered)
        self._by_id: Mapping[str, FilterDefinition] = MappingProxyType(by_id)

    @classmethod
    def from_entries(cls, entries: Iterable[dict[str, Any]]) -> FilterCatalog:
        return cls(FilterDefinition.from_registry_entry(e) for e in entries)

    def all(self) -> list[FilterDefinition]:
        return list(self._ordered)

    def get(self, filter_id: str) -> FilterDefinition | None:
        return self._by_id.get(filter_id)

    def ids(self) -> list[str]:
        return [d.id for d in self._ordered]

    def __contains__(self, filter_id: object) -> bool:
        return filter_id in self._by_id

    def __iter__(self) -> Iterator[FilterDefinition]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)
