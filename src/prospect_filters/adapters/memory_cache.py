"""Adapter: process-local value cache with per-key expiry."""

from __future__ import annotations

import threading
from typing import Any

from ..ports.clock import Clock, SystemClock

DEFAULT_MAX_ENTRIES = 10_000


class InMemoryValueCache:
    """Concrete ValueCachePort holding entries in a dict until they expire.

    Every ``set`` sweeps expired entries. When the cache is still full, the
    entry closest to expiry is evicted to make room.
    """

    def __init__(self, clock: Clock | None = None, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._clock = clock or SystemClock()
        self._max_entries = max_entries
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock.now() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            now = self._clock.now()
            self._sweep(now)
            if key not in self._entries and len(self._entries) >= self._max_entries:
                soonest = min(self._entries, key=lambda k: self._entries[k][0])
                del self._entries[soonest]
            self._entries[key] = (now + ttl_seconds, value)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
