"""Response models."""

from .pages import FilterValue, SearchPage, ValuePage

__all__ = [
    "FilterValue",
    "SearchPage",
    "ValuePage",
]
