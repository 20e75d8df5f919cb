"""Main entry point for the prospect-filters MCP server."""

import logging

from .config.runtime import get_settings
from .mcp.server import create_server


def main():
    """Run the filter engine MCP server over stdio."""
    logging.basicConfig(level=get_settings().log_level)
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
