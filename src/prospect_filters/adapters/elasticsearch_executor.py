"""Adapter: Elasticsearch-based SearchExecutor."""

from __future__ import annotations

import logging
import time
from typing import Any

from elasticsearch import Elasticsearch

from ..config.runtime import RuntimeSettings

logger = logging.getLogger(__name__)


class ElasticsearchExecutor:
    """Concrete SearchExecutor backed by the official Elasticsearch client."""

    def __init__(self, settings: RuntimeSettings, client: Elasticsearch | None = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> Elasticsearch:
        if self._client is None:
            self._client = Elasticsearch(
                self._settings.elasticsearch_url,
                api_key=self._settings.elasticsearch_api_key,
                request_timeout=self._settings.request_timeout_seconds,
                retry_on_timeout=True,
            )
        return self._client

    def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        start = time.perf_counter()
        response = self._get_client().search(index=index, body=body)
        took_ms = (time.perf_counter() - start) * 1000
        logger.debug("es_search", extra={"index": index, "latency_ms": round(took_ms, 2)})
        return response.body
