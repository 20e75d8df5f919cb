"""Tests for the MCP server: tool allowlist, tool payloads and the key gate."""

import json

import pytest

from prospect_filters.config.runtime import RuntimeSettings, get_settings
from prospect_filters.mcp import observability, tools
from prospect_filters.mcp.server import create_server
from prospect_filters.mcp.tools import ENGINE_ALLOWED_TOOLS
from prospect_filters.services.filter_manager import FilterManager
from prospect_filters.services.query_service import QueryService

FORBIDDEN_TOOLS = {"filters_create", "filters_delete", "index_delete", "registry_reload"}


def _get_tools(server):
    # FastMCP stores tools in _tool_manager._tools dict
    return server._tool_manager._tools


@pytest.fixture(autouse=True)
def offline_service(monkeypatch, registry, value_cache, fake_clock):
    settings = RuntimeSettings(_env_file=None)
    manager = FilterManager(registry, value_cache, settings=settings, clock=fake_clock)
    service = QueryService(manager, settings=settings)
    monkeypatch.setattr(tools, "_get_query_service", lambda: service)
    monkeypatch.delenv("REQUIRE_ENGINE_KEY", raising=False)
    get_settings.cache_clear()
    observability.reset_metrics()
    yield service
    get_settings.cache_clear()


def _call(name, **kwargs):
    server = create_server()
    return json.loads(_get_tools(server)[name].fn(**kwargs))


class TestToolRegistration:
    def test_exposes_exactly_the_allowed_tools(self):
        names = set(_get_tools(create_server()))
        assert names == ENGINE_ALLOWED_TOOLS, f"Expected {ENGINE_ALLOWED_TOOLS}, got {names}"

    def test_no_mutating_tools(self):
        assert not set(_get_tools(create_server())) & FORBIDDEN_TOOLS


class TestToolPayloads:
    def test_dsl_validate(self):
        out = _call("dsl_validate", dsl={"contact": {"company_size": 50}})
        assert out["valid"] is False
        assert out["normalized"]["company"] == {"company_size": {"include": [50]}}

    def test_dsl_detect_entity(self):
        assert _call("dsl_detect_entity", dsl={"contact": {"title": "CTO"}}) == {"entity": "contacts"}

    def test_query_compile(self):
        out = _call("query_compile", dsl={"company": {"industry": "Software"}})
        assert out["entity"] == "companies"
        assert out["query"]["query"]["bool"]["filter"] == [{"terms": {"industry": ["Software"]}}]

    def test_query_compile_strict_error_payload(self):
        out = _call("query_compile", dsl={"contact": {"bogus": 1}}, strict=True)
        assert out["errors"] == ["Unknown filter 'bogus'"]
        assert "error" in out

    def test_filters_list_filtered_by_entity(self):
        out = _call("filters_list", entity="company")
        ids = {f["id"] for f in out["filters"]}
        assert "industry" in ids
        assert "job_title" not in ids
        assert set(out["filters"][0]) == tools.ALLOWED_FILTER_KEYS

    def test_filter_values(self):
        out = _call("filter_values", filter_id="seniority", per_page=2)
        assert out["total"] == 11
        assert [v["id"] for v in out["data"]] == ["Owner", "Founder"]

    def test_filter_values_not_found(self):
        out = _call("filter_values", filter_id="nope")
        assert out == {"error": "Filter not found: nope", "filter_id": "nope"}

    def test_invocations_are_counted(self):
        _call("dsl_detect_entity", dsl={})
        _call("filter_values", filter_id="nope")
        snapshot = observability.metrics_snapshot()
        assert snapshot["tool_calls"]["dsl_detect_entity"] == 1
        assert snapshot["errors"] == {"filter_values": 1}


class TestDomainCounters:
    def test_violations_counted_by_kind_and_filter(self):
        _call("dsl_validate", dsl={"contact": {"company_size": 50, "bogus": 1}})
        _call("query_compile", dsl={"company": {"job_title": "CTO"}})
        snapshot = observability.metrics_snapshot()
        assert snapshot["dsl_violations"] == {"bucket_placement": 2, "unknown_filter": 1}
        assert snapshot["violating_filters"] == {"company_size": 1, "bogus": 1, "job_title": 1}

    def test_compile_counts_skipped_cross_bucket_filters(self):
        out = _call("query_compile", dsl={"contact": {"job_title": "CTO"}, "company": {"industry": "Software"}})
        assert out["skipped_filters"] == ["industry"]
        assert observability.metrics_snapshot()["cross_bucket_skipped"] == {"industry": 1}

    def test_value_lookups_per_filter(self):
        _call("filter_values", filter_id="seniority")
        _call("filter_values", filter_id="seniority", page=2)
        _call("filter_values", filter_id="nope")
        _call("filter_values", filter_id="also-nope")
        assert observability.metrics_snapshot()["value_lookups"] == {"seniority": 2, "<unknown>": 2}


class TestEngineKey:
    def test_key_required_but_missing(self, monkeypatch):
        monkeypatch.setenv("REQUIRE_ENGINE_KEY", "true")
        monkeypatch.delenv("MCP_ENGINE_KEY", raising=False)
        get_settings.cache_clear()
        with pytest.raises(PermissionError):
            create_server()

    def test_key_present(self, monkeypatch):
        monkeypatch.setenv("REQUIRE_ENGINE_KEY", "true")
        monkeypatch.setenv("MCP_ENGINE_KEY", "secret")
        get_settings.cache_clear()
        assert set(_get_tools(create_server())) == ENGINE_ALLOWED_TOOLS
