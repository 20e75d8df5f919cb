"""ElasticQueryBuilder: accumulates bool-query clauses and aggregations."""

from __future__ import annotations

import copy
from typing import Any

from ..models.pages import SearchPage, last_page_for
from ..ports.search import SearchExecutor


class ElasticQueryBuilder:
    """Mutable builder for one Elasticsearch request body.

    Handlers add clauses through ``filter`` / ``must`` / ``must_not``;
    ``paginate`` executes the body through the injected ``SearchExecutor``.
    """

    def __init__(self, index: str | None = None, executor: SearchExecutor | None = None) -> None:
        self._index = index
        self._executor = executor
        self._filter: list[dict[str, Any]] = []
        self._must: list[dict[str, Any]] = []
        self._must_not: list[dict[str, Any]] = []
        self._aggs: dict[str, Any] = {}
        self._sort: list[dict[str, Any]] = []

    @property
    def index_name(self) -> str | None:
        return self._index

    def index(self, name: str) -> ElasticQueryBuilder:
        self._index = name
        return self

    # --- clauses ---

    def filter(self, clause: dict[str, Any]) -> ElasticQueryBuilder:
        self._filter.append(clause)
        return self

    def must(self, clause: dict[str, Any]) -> ElasticQueryBuilder:
        self._must.append(clause)
        return self

    def must_not(self, clause: dict[str, Any]) -> ElasticQueryBuilder:
        self._must_not.append(clause)
        return self

    def multi_match(self, query: str, fields: list[str] | tuple[str, ...], options: dict[str, Any] | None = None) -> ElasticQueryBuilder:
        body: dict[str, Any] = {"query": query, "fields": list(fields)}
        body.update(options or {})
        return self.must({"multi_match": body})

    def terms_aggregation(self, name: str, field: str, options: dict[str, Any] | None = None) -> ElasticQueryBuilder:
        terms: dict[str, Any] = {"field": field}
        terms.update(options or {})
        self._aggs[name] = {"terms": terms}
        return self

    def sort(self, field: str, direction: str = "asc") -> ElasticQueryBuilder:
        self._sort.append({field: {"order": "desc" if direction == "desc" else "asc"}})
        return self

    # --- inspection ---

    @property
    def filter_clauses(self) -> list[dict[str, Any]]:
        return list(self._filter)

    @property
    def must_clauses(self) -> list[dict[str, Any]]:
        return list(self._must)

    @property
    def must_not_clauses(self) -> list[dict[str, Any]]:
        return list(self._must_not)

    def to_dict(self) -> dict[str, Any]:
        """Return the request body (query, aggs, sort); empty bool becomes match_all."""
        bool_query: dict[str, Any] = {}
        if self._filter:
            bool_query["filter"] = copy.deepcopy(self._filter)
        if self._must:
            bool_query["must"] = copy.deepcopy(self._must)
        if self._must_not:
            bool_query["must_not"] = copy.deepcopy(self._must_not)

        body: dict[str, Any] = {"query": {"bool": bool_query} if bool_query else {"match_all": {}}}
        if self._aggs:
            body["aggs"] = copy.deepcopy(self._aggs)
        if self._sort:
            body["sort"] = copy.deepcopy(self._sort)
        return body

    # --- execution ---

    def paginate(self, page: int = 1, per_page: int = 10) -> SearchPage:
        """Execute and return one page; ``per_page=0`` fetches aggregations only."""
        if self._executor is None:
            raise RuntimeError("ElasticQueryBuilder has no SearchExecutor to run against")
        if not self._index:
            raise RuntimeError("ElasticQueryBuilder has no index set")

        page = max(1, page)
        per_page = max(0, per_page)
        body = self.to_dict()
        body["from"] = (page - 1) * per_page
        body["size"] = per_page
        body["track_total_hits"] = True

        raw = self._executor.search(self._index, body)
        hits = raw.get("hits") or {}
        total_raw = hits.get("total", 0)
        total = int(total_raw.get("value", 0)) if isinstance(total_raw, dict) else int(total_raw or 0)
        data = [
            {"id": hit.get("_id"), **(hit.get("_source") or {})}
            for hit in hits.get("hits") or []
        ]
        return SearchPage(
            data=data,
            aggregations=raw.get("aggregations") or {},
            total=total,
            current_page=page,
            per_page=per_page,
            last_page=last_page_for(total, per_page),
        )
