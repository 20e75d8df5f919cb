"""Adapters: concrete implementations of the ports.

Redis and Elasticsearch adapters are imported from their modules directly
so that the in-memory path carries no infrastructure imports.
"""

from .json_registry import InMemoryRegistry, JsonFileRegistry
from .memory_cache import InMemoryValueCache

__all__ = ["InMemoryRegistry", "InMemoryValueCache", "JsonFileRegistry"]
