"""Handler for pass-through filters with no value lookup."""

from __future__ import annotations

from ..domain.definitions import Entity
from ..domain.query_builder import ElasticQueryBuilder
from ..domain.values import NormalizedFilterValue
from ..models.pages import ValuePage
from .base import FilterHandler


class DirectFilterHandler(FilterHandler):
    """Values are used verbatim: one include is a ``term``, several a ``terms``."""

    def apply(
        self,
        query: ElasticQueryBuilder,
        value: NormalizedFilterValue,
        entity: Entity,
    ) -> ElasticQueryBuilder:
        field = self.resolve_field(entity)
        if not field:
            return query
        self.apply_presence(query, field, value)
        self.apply_range(query, field, value)
        if len(value.include) == 1:
            query.filter({"term": {field: value.include[0]}})
        elif value.include:
            query.filter({"terms": {field: list(value.include)}})
        if value.exclude:
            query.must_not({"terms": {field: list(value.exclude)}})
        return query

    def get_values(self, search: str | None = None, page: int = 1, per_page: int = 10) -> ValuePage:
        return ValuePage.empty(page, per_page)
