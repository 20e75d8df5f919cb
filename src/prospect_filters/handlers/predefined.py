"""Handler for filters backed by a fixed list of options."""

from __future__ import annotations

from ..domain.definitions import Entity
from ..domain.query_builder import ElasticQueryBuilder
from ..domain.values import NormalizedFilterValue
from ..models.pages import ValuePage
from .base import FilterHandler


class PredefinedFilterHandler(FilterHandler):
    """Exact-match options (e.g. headcount bands, seniority levels)."""

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
        self.apply_terms(query, field, value)
        return query

    def get_values(self, search: str | None = None, page: int = 1, per_page: int = 10) -> ValuePage:
        return self.static_values(search, page, per_page)
