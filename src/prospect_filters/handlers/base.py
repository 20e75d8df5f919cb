"""Shared contract and helpers for filter handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..domain.definitions import Entity, FilterDefinition, Presence
from ..domain.query_builder import ElasticQueryBuilder
from ..domain.values import NormalizedFilterValue
from ..models.pages import FilterValue, ValuePage

QueryFactory = Callable[[Entity], ElasticQueryBuilder]

DEFAULT_VALUE_BUCKET_SIZE = 10_000


class FilterHandler(ABC):
    """Translate a normalized value into query clauses for one value source."""

    def __init__(
        self,
        definition: FilterDefinition,
        query_factory: QueryFactory | None = None,
        value_bucket_size: int = DEFAULT_VALUE_BUCKET_SIZE,
    ) -> None:
        self.definition = definition
        self._query_factory = query_factory
        self._bucket_size = value_bucket_size

    @abstractmethod
    def apply(
        self,
        query: ElasticQueryBuilder,
        value: NormalizedFilterValue,
        entity: Entity,
    ) -> ElasticQueryBuilder: ...

    @abstractmethod
    def get_values(self, search: str | None = None, page: int = 1, per_page: int = 10) -> ValuePage: ...

    def validate_values(self, values: list[dict[str, Any]]) -> bool:
        """True when every entry has a numeric or non-blank string ``value``."""
        if not values:
            return False
        for entry in values:
            v = entry.get("value") if isinstance(entry, dict) else None
            if isinstance(v, bool) or v is None:
                return False
            if isinstance(v, (int, float)):
                continue
            if isinstance(v, str) and v.strip():
                continue
            return False
        return True

    # ------------------------------------------------------------------
    # Field resolution
    # ------------------------------------------------------------------

    def resolve_fields(self, entity: Entity) -> tuple[str, ...]:
        """Fields for ``entity``, else the target entity's, else the legacy field."""
        mapping = self.definition.fields_by_entity
        fields = mapping.for_entity(entity)
        if fields:
            return fields
        fields = mapping.for_entity(self.definition.target_entity)
        if fields:
            return fields
        if self.definition.legacy_field:
            return (self.definition.legacy_field,)
        return ()

    def resolve_field(self, entity: Entity) -> str:
        fields = self.resolve_fields(entity)
        return fields[0] if fields else ""

    # ------------------------------------------------------------------
    # Clause helpers
    # ------------------------------------------------------------------

    @staticmethod
    def apply_presence(query: ElasticQueryBuilder, field: str, value: NormalizedFilterValue) -> None:
        if value.presence is Presence.known:
            query.filter({"exists": {"field": field}})
        elif value.presence is Presence.unknown:
            query.must_not({"exists": {"field": field}})

    @staticmethod
    def apply_range(query: ElasticQueryBuilder, field: str, value: NormalizedFilterValue) -> None:
        if value.range is None or value.range.is_open:
            return
        bounds: dict[str, float] = {}
        if value.range.min is not None:
            bounds["gte"] = value.range.min
        if value.range.max is not None:
            bounds["lte"] = value.range.max
        query.filter({"range": {field: bounds}})

    @staticmethod
    def apply_terms(query: ElasticQueryBuilder, field: str, value: NormalizedFilterValue) -> None:
        if value.include:
            query.filter({"terms": {field: list(value.include)}})
        if value.exclude:
            query.must_not({"terms": {field: list(value.exclude)}})

    # ------------------------------------------------------------------
    # Value listing
    # ------------------------------------------------------------------

    @staticmethod
    def paginate_results(values: list[FilterValue], page: int, per_page: int) -> ValuePage:
        return ValuePage.from_values(values, page, per_page)

    def static_values(self, search: str | None, page: int, per_page: int) -> ValuePage:
        """Page through the definition's ``options``, filtered by substring."""
        options = self.definition.options
        if search:
            needle = search.strip().lower()
            options = tuple(o for o in options if needle in o.lower())
        values = [FilterValue(id=o, name=o) for o in options]
        return self.paginate_results(values, page, per_page)
