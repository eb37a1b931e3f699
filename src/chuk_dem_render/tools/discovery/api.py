"""
Discovery tools: grid inspection and server information.

These tools write nothing and return information about grids and the
server configuration.
"""

import asyncio
import logging

from ...constants import (
    GRID_EXTENSION,
    OUTPUT_FORMATS,
    RENDER_MODES,
    ServerConfig,
    SuccessMessages,
)
from ...models.responses import (
    CapabilitiesResponse,
    ErrorResponse,
    GridInfoResponse,
    StatusResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_discovery_tools(mcp, renderer):
    """Register discovery tools with the MCP server."""

    @mcp.tool()
    async def dem_describe_grid(input_path: str, output_mode: str = "json") -> str:
        """Read an Esri ASCII grid and report its header and elevation range.

        Use this to check a grid before rendering it.

        Args:
            input_path: Path to the .asc grid
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Grid dimensions, origin, cell size, no-data value, and value range
        """
        try:
            info = await asyncio.to_thread(renderer.describe_grid, input_path)
            header = info.header
            response = GridInfoResponse.from_info(
                info,
                message=SuccessMessages.GRID_DESCRIBE.format(
                    header.nrows, header.ncols, header.cell_size, info.nodata_pixels
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_describe_grid failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_status(output_mode: str = "json") -> str:
        """Get server status including version and render configuration.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Server status information
        """
        try:
            options = renderer.options
            response = StatusResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                default_mode=options.mode,
                azimuth=options.azimuth,
                altitude=options.altitude,
                cell_size=options.cell_size,
                z_factor=options.z_factor,
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_status failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_capabilities(output_mode: str = "json") -> str:
        """Get full server capabilities including render modes and output formats.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Complete server capabilities
        """
        try:
            response = CapabilitiesResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                render_modes=RENDER_MODES,
                default_mode=renderer.options.mode,
                input_extension=GRID_EXTENSION,
                output_formats=OUTPUT_FORMATS,
                tool_count=5,
                llm_guidance=(
                    "Use dem_describe_grid to inspect a .asc grid. "
                    "Use dem_render_file to render one grid, or dem_render_directory "
                    "to render every .asc file under a directory. "
                    "Mode 'grayscale' writes <stem>.png; mode 'hillshade' writes "
                    "<stem>_hillshade.png (colour ramp with shaded relief)."
                ),
                message=f"{ServerConfig.NAME} v{ServerConfig.VERSION} capabilities",
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_capabilities failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
