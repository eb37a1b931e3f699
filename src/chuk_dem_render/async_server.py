#!/usr/bin/env python3
"""
Async DEM Render MCP Server using chuk-mcp-server

Renders Esri ASCII elevation grids to grayscale or shaded-relief PNGs
and exposes grid inspection tools.
"""

import logging

from chuk_mcp_server import ChukMCPServer

from .config import RenderOptions, log_level
from .constants import ServerConfig
from .core.renderer import DEMRenderer
from .tools.discovery import register_discovery_tools
from .tools.render import register_render_tools

logging.basicConfig(level=log_level())
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer(ServerConfig.NAME)

# Create renderer instance
renderer = DEMRenderer(RenderOptions.from_env())

# Register all tool modules
register_discovery_tools(mcp, renderer)
register_render_tools(mcp, renderer)

# Run the server
if __name__ == "__main__":
    logger.info("Starting DEM Render MCP Server...")
    mcp.run(stdio=True)
