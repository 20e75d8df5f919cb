"""FilterManager: registry lookup, ordered application and value listing.

All per-filter query logic lives in the handlers; the manager decides which
handler runs, in what order, and with which (sanitized) value.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from ..config.runtime import RuntimeSettings
from ..domain.catalog import FilterCatalog
from ..domain.definitions import Entity, FilterDefinition, FilterType, ValueSource
from ..domain.errors import FilterNotFoundError
from ..domain.filter_semantics import APPLY_PRIORITY, DEFAULT_APPLY_PRIORITY
from ..domain.query_builder import ElasticQueryBuilder
from ..domain.values import normalize_filter_value
from ..handlers import FilterHandler, QueryFactory, make_handler
from ..models.pages import ValuePage
from ..ports.cache import ValueCachePort, remember
from ..ports.clock import Clock, SystemClock
from ..ports.registry import FilterRegistryPort

logger = logging.getLogger(__name__)

VALUES_CACHE_KEY = "filters:values:{filter_id}:{page}:{per_page}"


class FilterManager:
    """Owns the filter catalog and dispatches filters to their handlers."""

    def __init__(
        self,
        registry: FilterRegistryPort,
        cache: ValueCachePort,
        query_factory: QueryFactory | None = None,
        settings: RuntimeSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._query_factory = query_factory
        self._settings = settings or RuntimeSettings()
        self._clock = clock or SystemClock()
        self._catalog: FilterCatalog | None = None
        self._loaded_at = 0.0
        self._load_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def catalog(self) -> FilterCatalog:
        """Current catalog, reloaded once ``registry_ttl_seconds`` has elapsed."""
        catalog = self._catalog
        if catalog is not None and not self._expired():
            return catalog
        with self._load_lock:
            if self._catalog is None or self._expired():
                self._catalog = FilterCatalog.from_entries(self._registry.load())
                self._loaded_at = self._clock.now()
                logger.info("filter_catalog_loaded", extra={"count": len(self._catalog)})
            return self._catalog

    def _expired(self) -> bool:
        return self._clock.now() - self._loaded_at >= self._settings.registry_ttl_seconds

    def get_active_filters(self) -> list[FilterDefinition]:
        return self.catalog().all()

    def get_filter(self, filter_id: str) -> FilterDefinition | None:
        return self.catalog().get(filter_id)

    def get_handler(self, definition: FilterDefinition) -> FilterHandler:
        return make_handler(definition, self._query_factory, self._settings.value_bucket_size)

    # ------------------------------------------------------------------
    # Query application
    # ------------------------------------------------------------------

    def apply_filters(
        self,
        query: ElasticQueryBuilder,
        filters: Mapping[str, Any],
        entity_context: Entity = Entity.company,
    ) -> ElasticQueryBuilder:
        """Apply every known filter in ``filters`` to ``query`` in priority order.

        Unknown ids are logged and skipped. Exclusions on filters that do not
        support them are cleared even if the DSL was never validated.
        """
        catalog = self.catalog()
        for filter_id in self._ordered_ids(catalog, filters):
            definition = catalog.get(filter_id)
            if definition is None:
                logger.warning("unknown_filter_ignored", extra={"filter_id": filter_id})
                continue

            value = normalize_filter_value(filters[filter_id])
            if value.exclude and not definition.supports_exclusion:
                logger.warning("exclusion_not_supported_removed", extra={"filter_id": filter_id})
                value = value.without_exclusions()

            query = self.get_handler(definition).apply(query, value, entity_context)
        return query

    @staticmethod
    def _ordered_ids(catalog: FilterCatalog, filters: Mapping[str, Any]) -> list[str]:
        # sorted() is stable: equal priorities keep their input order.
        def priority(filter_id: str) -> int:
            definition = catalog.get(filter_id)
            filter_type = definition.type if definition is not None else FilterType.text
            return APPLY_PRIORITY.get(filter_type.value, DEFAULT_APPLY_PRIORITY)

        return sorted(filters, key=priority)

    # ------------------------------------------------------------------
    # Value listing
    # ------------------------------------------------------------------

    def get_filter_values(
        self,
        filter_id: str,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> ValuePage:
        """Selectable values for one filter; raises FilterNotFoundError."""
        definition = self.get_filter(filter_id)
        if definition is None:
            raise FilterNotFoundError(filter_id)

        handler = self.get_handler(definition)
        if search:
            return handler.get_values(search, page, per_page)

        key = VALUES_CACHE_KEY.format(filter_id=definition.id, page=page, per_page=per_page)
        cached = remember(
            self._cache,
            key,
            self.values_ttl(definition),
            lambda: handler.get_values(None, page, per_page).model_dump(mode="json"),
        )
        return ValuePage.model_validate(cached)

    def values_ttl(self, definition: FilterDefinition) -> int:
        """Cache lifetime for a filter's value listing; 0 disables caching."""
        if definition.value_source is ValueSource.predefined:
            return self._settings.values_ttl_predefined_seconds
        if definition.value_source is ValueSource.specialized:
            return self._settings.values_ttl_specialized_seconds
        if definition.value_source is ValueSource.elasticsearch:
            return self._settings.values_ttl_elasticsearch_seconds
        return 0
