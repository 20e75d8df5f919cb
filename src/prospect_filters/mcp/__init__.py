"""MCP surface: server factory, tools, auth gate and observability."""
