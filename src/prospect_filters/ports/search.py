"""Port: search engine execution."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SearchExecutor(Protocol):
    """Run a query document against an index and return the raw response."""

    def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]: ...
