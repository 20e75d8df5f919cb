"""Filter handlers: one strategy per value source.

``HANDLER_TYPES`` is the only dispatch table; adding a value source means
adding an enum member and an entry here.
"""

from __future__ import annotations

from ..domain.definitions import FilterDefinition, ValueSource
from .base import DEFAULT_VALUE_BUCKET_SIZE, FilterHandler, QueryFactory
from .direct import DirectFilterHandler
from .elasticsearch import ElasticsearchFilterHandler
from .location import LocationFilterHandler
from .predefined import PredefinedFilterHandler

HANDLER_TYPES: dict[ValueSource, type[FilterHandler]] = {
    ValueSource.elasticsearch: ElasticsearchFilterHandler,
    ValueSource.predefined: PredefinedFilterHandler,
    ValueSource.direct: DirectFilterHandler,
    ValueSource.specialized: LocationFilterHandler,
}


def make_handler(
    definition: FilterDefinition,
    query_factory: QueryFactory | None = None,
    value_bucket_size: int = DEFAULT_VALUE_BUCKET_SIZE,
) -> FilterHandler:
    """Instantiate the handler registered for the definition's value source."""
    handler_cls = HANDLER_TYPES[definition.value_source]
    return handler_cls(definition, query_factory, value_bucket_size)


__all__ = [
    "HANDLER_TYPES",
    "DirectFilterHandler",
    "ElasticsearchFilterHandler",
    "FilterHandler",
    "LocationFilterHandler",
    "PredefinedFilterHandler",
    "QueryFactory",
    "make_handler",
]
