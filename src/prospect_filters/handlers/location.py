"""Handler for hierarchical location filters (city / state / country)."""

from __future__ import annotations

from typing import Any

from ..domain.definitions import Entity, Operator
from ..domain.query_builder import ElasticQueryBuilder
from ..domain.values import NormalizedFilterValue, Scalar
from ..models.pages import ValuePage
from .base import FilterHandler


class LocationFilterHandler(FilterHandler):
    """Match a place name against every location level of the entity.

    "Texas" should hit a state field and "Austin" a city field, so each value
    becomes a ``bool.should`` over all resolved fields.
    """

    def apply(
        self,
        query: ElasticQueryBuilder,
        value: NormalizedFilterValue,
        entity: Entity,
    ) -> ElasticQueryBuilder:
        fields = self.resolve_fields(entity)
        if not fields:
            return query

        self.apply_presence(query, fields[0], value)

        if value.include:
            if value.effective_operator is Operator.or_:
                query.filter(_any_of(fields, value.include))
            else:
                for v in value.include:
                    query.filter(_any_of(fields, (v,)))
        for v in value.exclude:
            query.must_not(_any_of(fields, (v,)))
        return query

    def get_values(self, search: str | None = None, page: int = 1, per_page: int = 10) -> ValuePage:
        return self.static_values(search, page, per_page)


def _any_of(fields: tuple[str, ...], values: tuple[Scalar, ...]) -> dict[str, Any]:
    return {
        "bool": {
            "should": [{"match_phrase": {f: v}} for v in values for f in fields],
            "minimum_should_match": 1,
        },
    }
