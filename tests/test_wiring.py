"""Tests for the composition root; no network calls are made."""

from prospect_filters.adapters.memory_cache import InMemoryValueCache
from prospect_filters.adapters.redis_cache import RedisValueCache
from prospect_filters.config.runtime import CacheBackend, RuntimeSettings
from prospect_filters.domain.definitions import Entity
from prospect_filters.services.query_service import QueryService
from prospect_filters.wiring import build_query_factory, build_query_service, build_value_cache


def test_cache_backend_selection():
    assert isinstance(build_value_cache(RuntimeSettings(_env_file=None)), InMemoryValueCache)
    redis_settings = RuntimeSettings(_env_file=None, cache_backend=CacheBackend.redis)
    assert isinstance(build_value_cache(redis_settings), RedisValueCache)


def test_query_factory_binds_index(fake_executor):
    factory = build_query_factory(RuntimeSettings(_env_file=None, contact_index="people"), fake_executor)
    assert factory(Entity.contact).index_name == "people"
    assert factory(Entity.company).index_name == "companies"


def test_query_service_compiles_with_bundled_registry(fake_executor):
    service = build_query_service(RuntimeSettings(_env_file=None), executor=fake_executor)
    assert isinstance(service, QueryService)
    compiled = service.compile({"contact": {"job_title": "CTO"}})
    assert compiled.index == "contacts"
    assert fake_executor.calls == []
