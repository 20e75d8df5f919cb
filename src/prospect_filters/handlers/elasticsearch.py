"""Handler for filters whose values live in the search index itself."""

from __future__ import annotations

from ..domain.definitions import Entity, FilterType, Operator
from ..domain.query_builder import ElasticQueryBuilder
from ..domain.values import NormalizedFilterValue, Scalar
from ..models.pages import FilterValue, ValuePage
from .base import FilterHandler

DISTINCT_VALUES_AGG = "distinct_values"


class ElasticsearchFilterHandler(FilterHandler):
    """Keyword/text filtering plus aggregation-backed value suggestion."""

    @property
    def _is_keyword(self) -> bool:
        return self.definition.type is FilterType.keyword

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
        if value.include:
            self._apply_include(query, field, value.include, value.effective_operator)
        if value.exclude:
            self._apply_exclude(query, field, value.exclude)
        return query

    def _apply_include(
        self,
        query: ElasticQueryBuilder,
        field: str,
        values: tuple[Scalar, ...],
        operator: Operator,
    ) -> None:
        if self._is_keyword:
            query.filter({"terms": {field: list(values)}})
            return
        if operator is Operator.or_:
            query.filter({
                "bool": {
                    "should": [{"match_phrase": {field: v}} for v in values],
                    "minimum_should_match": 1,
                },
            })
            return
        for v in values:
            query.filter({"match_phrase": {field: v}})

    def _apply_exclude(self, query: ElasticQueryBuilder, field: str, values: tuple[Scalar, ...]) -> None:
        if self._is_keyword:
            query.must_not({"terms": {field: list(values)}})
            return
        for v in values:
            query.must_not({"match_phrase": {field: v}})

    def get_values(self, search: str | None = None, page: int = 1, per_page: int = 10) -> ValuePage:
        entity = self.definition.target_entity
        field = self.resolve_field(entity)
        if not field or self._query_factory is None:
            return ValuePage.empty(page, per_page)

        query = self._query_factory(entity)
        if search:
            if self._is_keyword:
                query.must({
                    "bool": {
                        "should": [
                            {"prefix": {field: search}},
                            {"prefix": {f"{field}.lowercase": search.lower()}},
                        ],
                    },
                })
            else:
                query.multi_match(
                    search,
                    self.definition.search.suggest_fields or (field,),
                    {"type": "best_fields", "operator": "and", "minimum_should_match": "70%"},
                )

        query.terms_aggregation(
            DISTINCT_VALUES_AGG,
            field if self._is_keyword else f"{field}.keyword",
            {"size": self._bucket_size, "order": {"_key": "asc"}},
        )
        result = query.paginate(1, 0)

        buckets = (result.aggregations.get(DISTINCT_VALUES_AGG) or {}).get("buckets") or []
        values = [FilterValue(id=b["key"], name=str(b["key"])) for b in buckets if "key" in b]
        return self.paginate_results(values, page, per_page)
