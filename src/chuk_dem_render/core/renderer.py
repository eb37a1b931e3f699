"""
DEM Renderer: central orchestrator for grid-to-PNG conversion.

Discovers grids, runs the per-file pipeline, names and writes outputs,
and collects a batch report. Each file is an independent unit of work:
a failure aborts only that file's output unless fail_fast is requested.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from ..config import RenderOptions
from ..constants import (
    GRAYSCALE_SUFFIX,
    GRID_EXTENSION,
    HILLSHADE_SUFFIX,
    RENDER_MODES,
    ErrorMessages,
    RenderMode,
    RenderStatus,
    SuccessMessages,
)
from . import pipeline
from .errors import GridIOError, RenderError
from .grid_reader import GridHeader, read_grid

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Result of rendering a single grid file."""

    input_path: str
    mode: str
    status: str
    output_path: str | None = None
    shape: list[int] | None = None
    elevation_range: list[float] | None = None
    nodata_pixels: int = 0
    cell_size: float | None = None
    error: str | None = None


@dataclass
class BatchResult:
    """Result of rendering every grid under a directory."""

    input_dir: str
    output_dir: str
    mode: str
    results: list[RenderResult] = field(default_factory=list)

    @property
    def rendered(self) -> int:
        return sum(1 for r in self.results if r.status == RenderStatus.OK)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status == RenderStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == RenderStatus.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0


@dataclass
class GridInfo:
    """Header and value statistics of a grid, without rendering."""

    path: str
    header: GridHeader
    elevation_range: list[float] | None
    nodata_pixels: int
    valid_pixels: int


class DEMRenderer:
    """Renders Esri ASCII grids to grayscale or shaded-relief PNGs."""

    def __init__(self, options: RenderOptions | None = None) -> None:
        self.options = options or RenderOptions()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, input_dir: str | Path) -> list[Path]:
        """Recursively find grid files under input_dir, sorted by path."""
        root = Path(input_dir)
        if not root.is_dir():
            raise GridIOError(ErrorMessages.INPUT_NOT_DIRECTORY.format(root), root)
        return sorted(p for p in root.rglob(f"*{GRID_EXTENSION}") if p.is_file())

    def describe_grid(self, input_path: str | Path) -> GridInfo:
        """Read a grid and summarize its header and value range."""
        grid = read_grid(input_path)
        mask = pipeline.nodata_mask(grid.elevation, grid.header.nodata)
        nodata_pixels = int(np.count_nonzero(mask))

        value_range = None
        if nodata_pixels < mask.size:
            rng = pipeline.elevation_range(grid.elevation, grid.header.nodata)
            value_range = [rng.min, rng.max]

        return GridInfo(
            path=str(input_path),
            header=grid.header,
            elevation_range=value_range,
            nodata_pixels=nodata_pixels,
            valid_pixels=int(mask.size - nodata_pixels),
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @staticmethod
    def output_path(input_path: str | Path, output_dir: str | Path, mode: str) -> Path:
        """Output file for a grid: <stem>.png or <stem>_hillshade.png."""
        stem = Path(input_path).stem
        suffix = HILLSHADE_SUFFIX if mode == RenderMode.HILLSHADE else GRAYSCALE_SUFFIX
        return Path(output_dir) / f"{stem}{suffix}"

    def render_file(
        self,
        input_path: str | Path,
        output_dir: str | Path,
        mode: str | None = None,
    ) -> RenderResult:
        """
        Render one grid file into output_dir.

        An unsupported mode is reported and skipped without reading the
        file. Any pipeline failure raises a RenderError naming the file;
        no output is written in that case.

        Args:
            input_path: Path to a .asc grid
            output_dir: Existing output directory
            mode: grayscale or hillshade (defaults to the configured mode)

        Returns:
            RenderResult with status ok or skipped
        """
        mode = mode or self.options.mode
        input_path = Path(input_path)

        if mode not in RENDER_MODES:
            logger.warning(SuccessMessages.MODE_SKIPPED.format(input_path, mode))
            return RenderResult(
                input_path=str(input_path),
                mode=mode,
                status=RenderStatus.SKIPPED,
                error=ErrorMessages.UNSUPPORTED_MODE.format(mode, ", ".join(RENDER_MODES)),
            )

        logger.info(f"Processing: {input_path}")
        try:
            grid = read_grid(input_path)
            value_range = pipeline.elevation_range(grid.elevation, grid.header.nodata)
            nodata_pixels = int(
                np.count_nonzero(pipeline.nodata_mask(grid.elevation, grid.header.nodata))
            )

            cell_size = None
            if mode == RenderMode.HILLSHADE:
                cell_size = self.options.cell_size or grid.header.cell_size
                image = pipeline.render_hillshade(
                    grid,
                    azimuth=self.options.azimuth,
                    altitude=self.options.altitude,
                    cell_size=cell_size,
                    z_factor=self.options.z_factor,
                )
            else:
                image = pipeline.render_grayscale(grid)

            data = pipeline.encode_png(image)
            out_path = pipeline.write_png(data, self.output_path(input_path, output_dir, mode))

        except RenderError as e:
            raise e.with_path(input_path)

        if mode == RenderMode.HILLSHADE:
            logger.info(SuccessMessages.HILLSHADE_SAVED.format(out_path))
        else:
            logger.info(SuccessMessages.GRAYSCALE_SAVED.format(out_path))

        return RenderResult(
            input_path=str(input_path),
            mode=mode,
            status=RenderStatus.OK,
            output_path=str(out_path),
            shape=list(grid.shape),
            elevation_range=[value_range.min, value_range.max],
            nodata_pixels=nodata_pixels,
            cell_size=cell_size,
        )

    def render_directory(
        self,
        input_dir: str | Path,
        output_dir: str | Path,
        mode: str | None = None,
        fail_fast: bool = False,
    ) -> BatchResult:
        """
        Render every grid under input_dir into output_dir.

        Args:
            input_dir: Directory searched recursively for .asc files
            output_dir: Created if missing
            mode: grayscale or hillshade (defaults to the configured mode)
            fail_fast: Re-raise the first failure instead of recording it

        Returns:
            BatchResult with one RenderResult per discovered file
        """
        mode = mode or self.options.mode
        files = self.discover(input_dir)

        out_dir = Path(output_dir)
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise GridIOError(ErrorMessages.WRITE_FAILED.format(e), out_dir) from e

        batch = BatchResult(input_dir=str(input_dir), output_dir=str(out_dir), mode=mode)

        for path in files:
            try:
                result = self.render_file(path, out_dir, mode)
            except RenderError as e:
                if fail_fast:
                    raise
                logger.error(str(e))
                result = RenderResult(
                    input_path=str(path),
                    mode=mode,
                    status=RenderStatus.FAILED,
                    error=str(e),
                )
            batch.results.append(result)

        logger.info(
            SuccessMessages.BATCH_COMPLETE.format(
                len(batch.results), batch.rendered, batch.skipped, batch.failed
            )
        )
        return batch
