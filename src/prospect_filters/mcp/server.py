"""MCP server factory for the filter engine."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .auth import require_engine_scope
from .tools import register_engine_tools

SERVER_NAME = "prospect-filters"


def create_server() -> FastMCP:
    """Build and return a FastMCP server with the engine tools registered.

    Raises PermissionError when the engine key is required but missing.
    """
    require_engine_scope()
    server = FastMCP(SERVER_NAME)
    register_engine_tools(server)
    return server


if __name__ == "__main__":
    server = create_server()
    server.run(transport="stdio")
