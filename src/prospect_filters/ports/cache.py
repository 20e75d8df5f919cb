"""Port: key-value cache for filter value listings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class ValueCachePort(Protocol):
    """Atomic get/set with per-key TTL. ``get`` returns None on a miss."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...


def remember(cache: ValueCachePort, key: str, ttl_seconds: int, compute: Callable[[], T]) -> T:
    """Read-through: return the cached value or compute, store and return it.

    A TTL of zero or less bypasses the cache entirely. Concurrent misses on
    the same key may each compute; the result is a pure function of the key.
    """
    if ttl_seconds <= 0:
        return compute()
    cached = cache.get(key)
    if cached is not None:
        return cached
    value = compute()
    cache.set(key, value, ttl_seconds)
    return value
