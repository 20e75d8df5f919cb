"""Tests for ElasticQueryBuilder serialization and pagination."""

import pytest

from prospect_filters.domain.query_builder import ElasticQueryBuilder


class TestToDict:
    def test_empty_is_match_all(self):
        assert ElasticQueryBuilder().to_dict() == {"query": {"match_all": {}}}

    def test_only_non_empty_sections(self):
        query = ElasticQueryBuilder("contacts").filter({"term": {"a": 1}}).must_not({"term": {"b": 2}})
        assert query.to_dict() == {
            "query": {"bool": {"filter": [{"term": {"a": 1}}], "must_not": [{"term": {"b": 2}}]}},
        }

    def test_aggs_and_sort(self):
        query = ElasticQueryBuilder("contacts")
        query.terms_aggregation("names", "name.keyword", {"size": 5}).sort("name").sort("created_at", "desc")
        body = query.to_dict()
        assert body["aggs"] == {"names": {"terms": {"field": "name.keyword", "size": 5}}}
        assert body["sort"] == [{"name": {"order": "asc"}}, {"created_at": {"order": "desc"}}]

    def test_body_is_a_copy(self):
        query = ElasticQueryBuilder().filter({"term": {"a": 1}})
        query.to_dict()["query"]["bool"]["filter"].append({"term": {"b": 2}})
        assert query.filter_clauses == [{"term": {"a": 1}}]


class TestPaginate:
    def test_requires_executor_and_index(self, fake_executor):
        with pytest.raises(RuntimeError):
            ElasticQueryBuilder("contacts").paginate()
        with pytest.raises(RuntimeError):
            ElasticQueryBuilder(executor=fake_executor).paginate()

    def test_page_window_and_hits(self, fake_executor):
        fake_executor.response = {
            "hits": {
                "total": {"value": 25, "relation": "eq"},
                "hits": [{"_id": "c-1", "_source": {"name": "Ada"}}],
            },
        }
        page = ElasticQueryBuilder("contacts", fake_executor).paginate(3, 10)

        index, body = fake_executor.calls[0]
        assert index == "contacts"
        assert (body["from"], body["size"], body["track_total_hits"]) == (20, 10, True)
        assert page.data == [{"id": "c-1", "name": "Ada"}]
        assert page.total == 25
        assert page.current_page == 3
        assert page.last_page == 3

    def test_integer_total_and_aggregations_only(self, fake_executor):
        fake_executor.response = {"hits": {"total": 7, "hits": []}, "aggregations": {"x": {"buckets": []}}}
        page = ElasticQueryBuilder("contacts", fake_executor).paginate(1, 0)
        assert page.total == 7
        assert page.per_page == 0
        assert page.last_page == 1
        assert page.aggregations == {"x": {"buckets": []}}
