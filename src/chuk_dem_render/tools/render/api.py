"""
Render tools: grid to grayscale or shaded-relief PNG.

Rendering is synchronous and CPU-bound, so each tool runs the renderer
in a worker thread via asyncio.to_thread().
"""

import asyncio
import logging
from pathlib import Path

from ...constants import (
    DEFAULT_ALTITUDE,
    DEFAULT_AZIMUTH,
    DEFAULT_MODE,
    RenderMode,
    RenderStatus,
    SuccessMessages,
)
from ...core.renderer import DEMRenderer
from ...models.responses import (
    BatchResponse,
    ErrorResponse,
    RenderResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_render_tools(mcp, renderer):
    """Register render tools with the MCP server."""

    @mcp.tool()
    async def dem_render_file(
        input_path: str,
        output_dir: str,
        mode: str = DEFAULT_MODE,
        azimuth: float = DEFAULT_AZIMUTH,
        altitude: float = DEFAULT_ALTITUDE,
        cell_size: float | None = None,
        output_mode: str = "json",
    ) -> str:
        """Render a single Esri ASCII grid (.asc) to PNG.

        Grayscale mode writes <stem>.png with elevation scaled to 0-255.
        Hillshade mode writes <stem>_hillshade.png: a colour ramp modulated
        by Horn hillshading.

        Args:
            input_path: Path to the .asc grid
            output_dir: Directory for the PNG (created if missing)
            mode: "grayscale" or "hillshade"
            azimuth: Light azimuth in degrees from north (default 315)
            altitude: Light altitude in degrees above horizon (default 45)
            cell_size: Cell size override (default: the grid's cellsize)
            output_mode: "json" or "text"

        Returns:
            Render result with output path, shape, and elevation range
        """
        try:
            options = renderer.options.with_overrides(
                azimuth=azimuth, altitude=altitude, cell_size=cell_size
            )
            worker = DEMRenderer(options)

            def _run():
                Path(output_dir).mkdir(parents=True, exist_ok=True)
                return worker.render_file(input_path, output_dir, mode)

            result = await asyncio.to_thread(_run)

            if result.status == RenderStatus.SKIPPED:
                message = SuccessMessages.MODE_SKIPPED.format(input_path, mode)
            elif mode == RenderMode.HILLSHADE:
                message = SuccessMessages.HILLSHADE_SAVED.format(result.output_path)
            else:
                message = SuccessMessages.GRAYSCALE_SAVED.format(result.output_path)

            response = RenderResponse.from_result(result, message=message)
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_render_file failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_render_directory(
        input_dir: str,
        output_dir: str,
        mode: str = DEFAULT_MODE,
        fail_fast: bool = False,
        output_mode: str = "json",
    ) -> str:
        """Render every .asc grid under a directory (recursively) to PNG.

        Each file is processed independently; failures are reported per
        file and do not stop the batch unless fail_fast is set.

        Args:
            input_dir: Directory searched recursively for .asc files
            output_dir: Directory for the PNGs (created if missing)
            mode: "grayscale" or "hillshade"
            fail_fast: Stop at the first failing file
            output_mode: "json" or "text"

        Returns:
            Batch summary with per-file results
        """
        try:
            batch = await asyncio.to_thread(
                renderer.render_directory, input_dir, output_dir, mode, fail_fast
            )
            response = BatchResponse.from_batch(
                batch,
                message=SuccessMessages.BATCH_COMPLETE.format(
                    len(batch.results), batch.rendered, batch.skipped, batch.failed
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_render_directory failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
