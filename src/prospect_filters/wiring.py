"""Composition root: the single place where all wiring happens.

Call ``build_filter_manager()`` or ``build_query_service()`` to get a
fully-constructed service with real adapters.  No ad-hoc construction
elsewhere.
"""

from __future__ import annotations

from .adapters.json_registry import JsonFileRegistry
from .adapters.memory_cache import InMemoryValueCache
from .config.runtime import CacheBackend, RuntimeSettings, get_settings
from .domain.definitions import Entity
from .domain.query_builder import ElasticQueryBuilder
from .handlers import QueryFactory
from .ports.cache import ValueCachePort
from .ports.search import SearchExecutor
from .services.filter_manager import FilterManager
from .services.query_service import QueryService


def build_value_cache(settings: RuntimeSettings) -> ValueCachePort:
    """In-memory cache by default; Redis when ``cache_backend=redis``."""
    if settings.cache_backend is CacheBackend.redis:
        from .adapters.redis_cache import RedisValueCache
        return RedisValueCache(settings)
    return InMemoryValueCache()


def build_search_executor(settings: RuntimeSettings) -> SearchExecutor:
    from .adapters.elasticsearch_executor import ElasticsearchExecutor
    return ElasticsearchExecutor(settings)


def build_query_factory(settings: RuntimeSettings, executor: SearchExecutor | None = None) -> QueryFactory:
    """Return a factory creating builders bound to the entity's index."""
    indices = {Entity.contact: settings.contact_index, Entity.company: settings.company_index}

    def factory(entity: Entity) -> ElasticQueryBuilder:
        return ElasticQueryBuilder(indices[entity], executor)

    return factory


def build_filter_manager(
    settings: RuntimeSettings | None = None,
    executor: SearchExecutor | None = None,
) -> FilterManager:
    """Construct a FilterManager with real adapters."""
    settings = settings or get_settings()
    executor = executor or build_search_executor(settings)
    return FilterManager(
        registry=JsonFileRegistry(settings.registry_path),
        cache=build_value_cache(settings),
        query_factory=build_query_factory(settings, executor),
        settings=settings,
    )


def build_query_service(
    settings: RuntimeSettings | None = None,
    manager: FilterManager | None = None,
    executor: SearchExecutor | None = None,
) -> QueryService:
    """Construct a QueryService sharing one executor with its FilterManager."""
    settings = settings or get_settings()
    executor = executor or build_search_executor(settings)
    manager = manager or build_filter_manager(settings, executor)
    return QueryService(
        manager=manager,
        query_factory=build_query_factory(settings, executor),
        settings=settings,
    )
