"""Services: filter manager and query compilation."""

from .filter_manager import FilterManager
from .query_service import CompiledQuery, QueryService

__all__ = [
    "CompiledQuery",
    "FilterManager",
    "QueryService",
]
