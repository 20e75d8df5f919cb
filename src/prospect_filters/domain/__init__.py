"""Domain types shared across the application."""

from .catalog import FilterCatalog
from .definitions import (
    Entity,
    FieldsByEntity,
    FilterDefinition,
    FilterMode,
    FilterType,
    Operator,
    Presence,
    ValueSource,
)
from .filter_semantics import (
    RULE_APPLY_ORDER,
    RULE_BUCKET_PLACEMENT,
    RULE_ENTITY_DETECTION,
    RULE_EXCLUSION_OPT_IN,
    RULE_EXISTS_PRESENCE_ONLY,
    RULE_RANGE_REQUIRED,
)
from .values import NormalizedFilterValue, RangeBound, normalize_filter_value

__all__ = [
    "Entity",
    "FieldsByEntity",
    "FilterCatalog",
    "FilterDefinition",
    "FilterMode",
    "FilterType",
    "NormalizedFilterValue",
    "Operator",
    "Presence",
    "RangeBound",
    "ValueSource",
    "normalize_filter_value",
    "RULE_APPLY_ORDER",
    "RULE_BUCKET_PLACEMENT",
    "RULE_ENTITY_DETECTION",
    "RULE_EXCLUSION_OPT_IN",
    "RULE_EXISTS_PRESENCE_ONLY",
    "RULE_RANGE_REQUIRED",
]
