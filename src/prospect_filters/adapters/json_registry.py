"""Adapter: filter registry read from a JSON document."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_BUNDLED_PACKAGE = "prospect_filters.data"
_BUNDLED_FILE = "filters.json"


class JsonFileRegistry:
    """Concrete FilterRegistryPort backed by a JSON list of filter entries.

    Without a path the registry bundled with the package is used.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None

    def load(self) -> list[dict[str, Any]]:
        if self._path is not None:
            text = self._path.read_text(encoding="utf-8")
            source = str(self._path)
        else:
            text = resources.files(_BUNDLED_PACKAGE).joinpath(_BUNDLED_FILE).read_text(encoding="utf-8")
            source = f"{_BUNDLED_PACKAGE}/{_BUNDLED_FILE}"

        raw = json.loads(text)
        if isinstance(raw, dict):
            raw = raw.get("filters", [])
        if not isinstance(raw, list):
            raise ValueError(f"Filter registry {source} must contain a list of filters")

        entries = [e for e in raw if isinstance(e, dict)]
        logger.debug("registry_loaded", extra={"source": source, "count": len(entries)})
        return entries


class InMemoryRegistry:
    """Registry over a fixed list of entries; used by tests and embedding apps."""

    def __init__(self, entries: list[dict[str, Any]]) -> None:
        self._entries = [dict(e) for e in entries]
        self.load_count = 0

    def load(self) -> list[dict[str, Any]]:
        self.load_count += 1
        return [dict(e) for e in self._entries]
