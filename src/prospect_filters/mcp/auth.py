"""MCP auth: optional engine key gate. Rejects calls when the key is required but unset."""

from __future__ import annotations

import os


def require_engine_scope() -> None:
    """Raise PermissionError if ``require_engine_key`` is on and MCP_ENGINE_KEY is unset."""
    from ..config.runtime import get_settings

    settings = get_settings()
    if not settings.require_engine_key:
        return
    if not os.environ.get("MCP_ENGINE_KEY"):
        raise PermissionError("Filter engine requires MCP_ENGINE_KEY to be set")
