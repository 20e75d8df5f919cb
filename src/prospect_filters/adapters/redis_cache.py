"""Adapter: Redis-backed value cache shared between processes."""

from __future__ import annotations

import json
import logging
from typing import Any

import redis

from ..config.runtime import RuntimeSettings

logger = logging.getLogger(__name__)


class RedisValueCache:
    """Concrete ValueCachePort storing JSON documents with ``SETEX``."""

    def __init__(self, settings: RuntimeSettings, client: redis.Redis | None = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(
                self._settings.redis_url,
                socket_timeout=self._settings.request_timeout_seconds,
            )
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._settings.cache_key_prefix}{key}"

    def get(self, key: str) -> Any | None:
        raw = self._get_client().get(self._key(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("cache_entry_corrupt", extra={"key": key})
            return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        self._get_client().setex(self._key(key), ttl_seconds, json.dumps(value, default=str))
