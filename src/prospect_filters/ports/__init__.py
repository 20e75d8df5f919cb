"""Port interfaces (Protocols).

Services depend only on these, never on concrete adapters.
No Elasticsearch, Redis or other infrastructure imports allowed here.
"""

from .cache import ValueCachePort, remember
from .clock import Clock, SystemClock
from .registry import FilterRegistryPort
from .search import SearchExecutor

__all__ = [
    "Clock",
    "FilterRegistryPort",
    "SearchExecutor",
    "SystemClock",
    "ValueCachePort",
    "remember",
]
