"""Filter DSL validation and Elasticsearch query compilation for contact/company search."""

from .domain.catalog import FilterCatalog
from .domain.definitions import Entity, FilterDefinition
from .domain.dsl_validator import DslValidator, ValidationResult
from .domain.values import NormalizedFilterValue, normalize_filter_value

__version__ = "0.1.0"
__all__ = [
    "DslValidator",
    "Entity",
    "FilterCatalog",
    "FilterDefinition",
    "NormalizedFilterValue",
    "ValidationResult",
    "normalize_filter_value",
]
