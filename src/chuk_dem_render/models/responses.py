"""
Response models for chuk-dem-render.

All CLI reports and tool responses are Pydantic models for type safety
and a consistent API.
"""

from pydantic import BaseModel, ConfigDict, Field


def format_response(model: BaseModel, output_mode: str = "json") -> str:
    """Format a response model as JSON or human-readable text.

    Args:
        model: Pydantic response model instance
        output_mode: "json" (default) or "text"

    Returns:
        Formatted string
    """
    if output_mode == "text" and hasattr(model, "to_text"):
        return str(model.to_text())
    return str(model.model_dump_json())


class ErrorResponse(BaseModel):
    """Error response model for failures."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message describing what went wrong")

    def to_text(self) -> str:
        return f"Error: {self.error}"


class RenderResponse(BaseModel):
    """Response model for a single rendered (or skipped/failed) grid."""

    model_config = ConfigDict(extra="forbid")

    input_path: str = Field(..., description="Source grid path")
    mode: str = Field(..., description="Render mode requested")
    status: str = Field(..., description="ok, skipped, or failed")
    output_path: str | None = Field(None, description="Written PNG path")
    shape: list[int] | None = Field(None, description="Image shape [rows, cols]")
    elevation_range: list[float] | None = Field(None, description="[min, max] valid elevation")
    nodata_pixels: int = Field(default=0, description="Number of no-data cells", ge=0)
    cell_size: float | None = Field(None, description="Cell size used for hillshading")
    error: str | None = Field(None, description="Failure or skip reason")
    message: str = Field(default="", description="Operation result message")

    @classmethod
    def from_result(cls, result, message: str = "") -> "RenderResponse":
        """Build from a core RenderResult."""
        return cls(
            input_path=result.input_path,
            mode=result.mode,
            status=result.status,
            output_path=result.output_path,
            shape=result.shape,
            elevation_range=result.elevation_range,
            nodata_pixels=result.nodata_pixels,
            cell_size=result.cell_size,
            error=result.error,
            message=message,
        )

    def to_text(self) -> str:
        if self.status != "ok":
            return f"{self.status.upper()} {self.input_path}: {self.error}"
        lines = [f"OK {self.input_path} -> {self.output_path}"]
        if self.shape:
            lines.append(f"  Shape: {self.shape[0]}x{self.shape[1]}")
        if self.elevation_range:
            lo, hi = self.elevation_range
            lines.append(f"  Elevation: {lo:.2f} to {hi:.2f}")
        if self.nodata_pixels:
            lines.append(f"  No-data cells: {self.nodata_pixels}")
        if self.cell_size is not None:
            lines.append(f"  Cell size: {self.cell_size}")
        return "\n".join(lines)


class BatchResponse(BaseModel):
    """Response model for a directory render run."""

    model_config = ConfigDict(extra="forbid")

    input_dir: str = Field(..., description="Directory searched for grids")
    output_dir: str = Field(..., description="Directory PNGs were written to")
    mode: str = Field(..., description="Render mode requested")
    total: int = Field(..., description="Files discovered", ge=0)
    rendered: int = Field(..., description="Files rendered", ge=0)
    skipped: int = Field(..., description="Files skipped", ge=0)
    failed: int = Field(..., description="Files that failed", ge=0)
    results: list[RenderResponse] = Field(..., description="Per-file results")
    message: str = Field(..., description="Operation result message")

    @classmethod
    def from_batch(cls, batch, message: str) -> "BatchResponse":
        """Build from a core BatchResult."""
        return cls(
            input_dir=batch.input_dir,
            output_dir=batch.output_dir,
            mode=batch.mode,
            total=len(batch.results),
            rendered=batch.rendered,
            skipped=batch.skipped,
            failed=batch.failed,
            results=[RenderResponse.from_result(r) for r in batch.results],
            message=message,
        )

    def to_text(self) -> str:
        lines = [self.message, f"Input: {self.input_dir}", f"Output: {self.output_dir}", ""]
        for r in self.results:
            lines.append(r.to_text())
        return "\n".join(lines)


class GridInfoResponse(BaseModel):
    """Response model for grid inspection."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Grid path")
    ncols: int = Field(..., description="Number of columns", gt=0)
    nrows: int = Field(..., description="Number of rows", gt=0)
    xll: float = Field(..., description="Lower-left x coordinate")
    yll: float = Field(..., description="Lower-left y coordinate")
    registration: str = Field(..., description="Origin registration (corner or center)")
    cell_size: float = Field(..., description="Cell size in ground units", gt=0)
    nodata_value: float | None = Field(None, description="Declared no-data sentinel")
    elevation_range: list[float] | None = Field(None, description="[min, max] valid elevation")
    nodata_pixels: int = Field(..., description="Number of no-data cells", ge=0)
    valid_pixels: int = Field(..., description="Number of valid cells", ge=0)
    message: str = Field(..., description="Operation result message")

    @classmethod
    def from_info(cls, info, message: str) -> "GridInfoResponse":
        """Build from a core GridInfo."""
        header = info.header
        return cls(
            path=info.path,
            ncols=header.ncols,
            nrows=header.nrows,
            xll=header.xll,
            yll=header.yll,
            registration=header.registration,
            cell_size=header.cell_size,
            nodata_value=header.nodata if header.has_nodata else None,
            elevation_range=info.elevation_range,
            nodata_pixels=info.nodata_pixels,
            valid_pixels=info.valid_pixels,
            message=message,
        )

    def to_text(self) -> str:
        lines = [
            f"Grid: {self.path}",
            f"Size: {self.nrows} rows x {self.ncols} cols",
            f"Origin ({self.registration}): {self.xll}, {self.yll}",
            f"Cell size: {self.cell_size}",
            f"No-data value: {self.nodata_value if self.nodata_value is not None else 'none'}",
            f"No-data cells: {self.nodata_pixels} / {self.nodata_pixels + self.valid_pixels}",
        ]
        if self.elevation_range:
            lines.append(
                f"Elevation: {self.elevation_range[0]:.2f} to {self.elevation_range[1]:.2f}"
            )
        return "\n".join(lines)


class StatusResponse(BaseModel):
    """Response model for server status queries."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(default="chuk-dem-render", description="Server name")
    version: str = Field(default="0.1.0", description="Server version")
    default_mode: str = Field(..., description="Default render mode")
    azimuth: float = Field(..., description="Configured light azimuth")
    altitude: float = Field(..., description="Configured light altitude")
    cell_size: float | None = Field(None, description="Cell size override (None = from header)")
    z_factor: float = Field(..., description="Vertical exaggeration factor")

    def to_text(self) -> str:
        cell = self.cell_size if self.cell_size is not None else "from grid header"
        lines = [
            f"{self.server} v{self.version}",
            f"Default mode: {self.default_mode}",
            f"Light: azimuth {self.azimuth:.0f}, altitude {self.altitude:.0f}",
            f"Cell size: {cell}",
            f"Z-factor: {self.z_factor}",
        ]
        return "\n".join(lines)


class CapabilitiesResponse(BaseModel):
    """Response model for server capabilities listing."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    render_modes: list[str] = Field(..., description="Available render modes")
    default_mode: str = Field(..., description="Default render mode")
    input_extension: str = Field(..., description="Grid file extension searched for")
    output_formats: list[str] = Field(..., description="Supported output formats")
    tool_count: int = Field(..., description="Number of available tools", ge=0)
    llm_guidance: str = Field(..., description="LLM-friendly usage guidance for the server")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"{self.server} v{self.version}",
            f"Tools: {self.tool_count}",
            f"Modes: {', '.join(self.render_modes)} (default {self.default_mode})",
            f"Input: *{self.input_extension}",
            f"Output formats: {', '.join(self.output_formats)}",
            f"Guidance: {self.llm_guidance}",
        ]
        return "\n".join(lines)
