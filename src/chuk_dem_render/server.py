#!/usr/bin/env python3
"""
DEM Render MCP Server - Entry Point

This module provides the async MCP server for rendering Esri ASCII
elevation grids. Supports both stdio (for Claude Desktop) and HTTP
(for API access) transports.
"""

import argparse
import logging
import os
import sys

from .config import load_env
from .constants import EnvVar

# Load environment variables from .env file
load_env()

logger = logging.getLogger(__name__)

# Import mcp instance and all registered tools from async server
from .async_server import mcp  # noqa: F401, E402


def main() -> None:
    """Run the MCP server over stdio or HTTP."""
    parser = argparse.ArgumentParser(description="DEM Render MCP Server")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["stdio", "http"],
        default=None,
        help="Transport (default: stdio when piped or MCP_STDIO is set, else http)",
    )
    parser.add_argument("--host", default="localhost", help="HTTP host (default: localhost)")
    parser.add_argument("--port", type=int, default=8004, help="HTTP port (default: 8004)")
    args = parser.parse_args()

    mode = args.mode
    if mode is None:
        piped = os.environ.get(EnvVar.MCP_STDIO) or not sys.stdin.isatty()
        mode = "stdio" if piped else "http"

    if mode == "stdio":
        print("DEM Render MCP Server starting on stdio", file=sys.stderr)
        mcp.run(stdio=True)
    else:
        print(f"DEM Render MCP Server listening on {args.host}:{args.port}", file=sys.stderr)
        mcp.run(host=args.host, port=args.port, stdio=False)


if __name__ == "__main__":
    main()
