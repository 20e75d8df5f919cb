"""Port: read-only filter registry."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FilterRegistryPort(Protocol):
    """Source of raw filter definitions, in registry order."""

    def load(self) -> list[dict[str, Any]]: ...
