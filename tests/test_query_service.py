"""Tests for QueryService: validate, compile, search."""

import logging

import pytest

from prospect_filters.config.runtime import RuntimeSettings
from prospect_filters.domain.definitions import Entity
from prospect_filters.domain.dsl_validator import COMPANIES, CONTACTS
from prospect_filters.domain.errors import DslValidationError
from prospect_filters.domain.query_builder import ElasticQueryBuilder
from prospect_filters.services.filter_manager import FilterManager
from prospect_filters.services.query_service import QueryService


def _make_service(registry, cache, clock, executor=None, **overrides) -> QueryService:
    settings = RuntimeSettings(_env_file=None, contact_index="people", company_index="orgs", **overrides)
    manager = FilterManager(registry, cache, settings=settings, clock=clock)
    if executor is None:
        return QueryService(manager, settings=settings)
    indices = {Entity.contact: settings.contact_index, Entity.company: settings.company_index}

    def factory(entity):
        return ElasticQueryBuilder(indices[entity], executor)

    return QueryService(manager, factory, settings)


@pytest.fixture
def service(registry, value_cache, fake_clock):
    return _make_service(registry, value_cache, fake_clock)


class TestCompile:
    def test_contact_query(self, service):
        compiled = service.compile({"contact": {"job_title": "CTO"}, "company": {}})
        assert compiled.entity == CONTACTS
        assert compiled.index == "people"
        assert compiled.query == {"query": {"bool": {"filter": [{"terms": {"title": ["CTO"]}}]}}}
        assert compiled.validation.valid is True

    def test_company_query(self, service):
        compiled = service.compile({"company": {"industry": {"include": ["Software"], "exclude": ["Retail"]}}})
        assert compiled.entity == COMPANIES
        assert compiled.index == "orgs"
        assert compiled.query["query"]["bool"] == {
            "filter": [{"terms": {"industry": ["Software"]}}],
            "must_not": [{"terms": {"industry": ["Retail"]}}],
        }

    def test_other_bucket_uses_only_fields_of_target_index(self, service):
        compiled = service.compile({
            "contact": {"job_title": "CTO"},
            "company": {"industry": "Software", "company_size": "51-200", "company_domain": "acme.com"},
        })
        assert compiled.index == "people"
        # company_domain has a contact-side field; industry and company_size do not
        assert compiled.query["query"]["bool"]["filter"] == [
            {"terms": {"title": ["CTO"]}},
            {"term": {"company_website": "acme.com"}},
        ]
        assert set(compiled.skipped_filters) == {"industry", "company_size"}

    def test_person_and_company_locations_do_not_merge(self, service):
        compiled = service.compile({
            "contact": {"countries": {"include": ["US"]}},
            "company": {"countries": {"include": ["DE"]}},
        })
        assert compiled.entity == COMPANIES
        assert compiled.query["query"]["bool"]["filter"] == [{
            "bool": {
                "should": [{"match_phrase": {"location.country": "DE"}}],
                "minimum_should_match": 1,
            },
        }]
        assert compiled.skipped_filters == ("countries",)

    def test_skipped_filters_are_logged(self, service, caplog):
        with caplog.at_level(logging.WARNING, logger="prospect_filters.services.query_service"):
            service.compile({"contact": {"job_title": "CTO"}, "company": {"industry": "Software"}})
        records = [r for r in caplog.records if r.getMessage() == "cross_bucket_filter_skipped"]
        assert records and records[0].filter_ids == ["industry"]

    def test_misplaced_job_title_still_targets_contacts(self, service):
        compiled = service.compile({"company": {"job_title": "CEO"}})
        assert compiled.entity == CONTACTS
        assert compiled.validation.valid is False
        assert compiled.query["query"]["bool"]["filter"] == [{"terms": {"title": ["CEO"]}}]

    def test_best_effort_drops_unknown_filters(self, service):
        compiled = service.compile({"contact": {"bogus": 1}})
        assert compiled.query == {"query": {"match_all": {}}}
        assert compiled.validation.errors == ["Unknown filter 'bogus'"]

    def test_strict_raises_with_all_errors(self, service):
        with pytest.raises(DslValidationError) as exc:
            service.compile({"contact": {"bogus": 1, "company_size": "1-10"}}, strict=True)
        assert exc.value.errors == [
            "Unknown filter 'bogus'",
            "Filter 'company_size' belongs in company bucket, not contact bucket",
        ]

    def test_strict_from_settings(self, registry, value_cache, fake_clock):
        service = _make_service(registry, value_cache, fake_clock, strict_validation=True)
        with pytest.raises(DslValidationError):
            service.compile({"contact": {"bogus": 1}})
        assert service.compile({"contact": {"bogus": 1}}, strict=False).entity == CONTACTS

    def test_to_dict(self, service):
        d = service.compile({"contact": {"job_title": "CTO"}}).to_dict()
        assert set(d) == {"entity", "index", "query", "validation", "skipped_filters"}
        assert d["skipped_filters"] == []
        assert d["validation"]["valid"] is True


class TestValidateAndDetect:
    def test_validate(self, service):
        assert service.validate({"contact": {"company_size": 50}}).normalized["company"] == {
            "company_size": {"include": [50]}
        }

    def test_detect_entity(self, service):
        assert service.detect_entity({"company": {"industry": "x"}}) == COMPANIES


class TestSearch:
    def test_search_pages_through_executor(self, registry, value_cache, fake_clock, fake_executor):
        fake_executor.response = {
            "hits": {"total": {"value": 11}, "hits": [{"_id": "1", "_source": {"name": "Ada"}}]},
        }
        service = _make_service(registry, value_cache, fake_clock, fake_executor)
        page = service.search({"contact": {"job_title": "CTO"}}, page=2, per_page=5)

        index, body = fake_executor.calls[0]
        assert index == "people"
        assert (body["from"], body["size"]) == (5, 5)
        assert page.data == [{"id": "1", "name": "Ada"}]
        assert page.last_page == 3

    @pytest.mark.parametrize("page, per_page", [(0, 10), (1, 0), (1, 101)])
    def test_rejects_bad_window(self, service, page, per_page):
        with pytest.raises(ValueError):
            service.search({"contact": {}}, page=page, per_page=per_page)

    def test_offline_service_cannot_search(self, service):
        with pytest.raises(RuntimeError):
            service.search({"contact": {"job_title": "CTO"}})
