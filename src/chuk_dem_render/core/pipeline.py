"""
Raster pipeline for DEM rendering.

All functions are synchronous and pure apart from write_png().
Handles intensity normalization, the colour ramp, Horn hillshading,
multiplicative blending, and PNG output.

Colour ramp, hillshade and blend arithmetic run in float32. The normalizer
works in float64 and rounds; the colour ramp truncates.
"""

import io
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import NDArray
from PIL import Image
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    DEFAULT_ALTITUDE,
    DEFAULT_AZIMUTH,
    DEFAULT_CELL_SIZE,
    DEFAULT_Z_FACTOR,
    FLAT_INTENSITY,
    INTENSITY_MAX,
    NODATA_INTENSITY,
    RETRY_ATTEMPTS,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
    ErrorMessages,
)
from .errors import (
    DegenerateRangeError,
    DimensionMismatchError,
    EncodeError,
    GridIOError,
)
from .grid_reader import ElevationGrid

logger = logging.getLogger(__name__)

# Type aliases
FloatArray = NDArray[np.floating[Any]]
ByteArray = NDArray[np.uint8]

_PI = np.float32(np.pi)
_F255 = np.float32(255.0)

_UMASK_LOCK = threading.Lock()


class ElevationRange(NamedTuple):
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min


# ---------------------------------------------------------------------------
# Retry decorator for output writes
# ---------------------------------------------------------------------------

_retry_transient_io = retry(
    stop=stop_after_attempt(RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
    retry=retry_if_exception_type((TimeoutError, InterruptedError, BlockingIOError)),
    reraise=True,
)


# ---------------------------------------------------------------------------
# Intensity normalization
# ---------------------------------------------------------------------------


def nodata_mask(elevation: FloatArray, nodata: float) -> NDArray[np.bool_]:
    """
    Cells to exclude from scaling.

    A cell is no-data when it equals the sentinel exactly or is not
    finite (NaN, +/-inf).
    """
    return (elevation == nodata) | ~np.isfinite(elevation)


def elevation_range(elevation: FloatArray, nodata: float) -> ElevationRange:
    """
    Compute (min, max) over valid cells.

    Raises:
        DegenerateRangeError: every cell is no-data
    """
    valid = elevation[~nodata_mask(elevation, nodata)]
    if valid.size == 0:
        raise DegenerateRangeError(ErrorMessages.DEGENERATE_RANGE.format(elevation.size, nodata))
    return ElevationRange(float(np.min(valid)), float(np.max(valid)))


def normalize(
    elevation: FloatArray,
    nodata: float,
    value_range: ElevationRange | None = None,
) -> ByteArray:
    """
    Map elevation to 8-bit intensity, flipped so north is at the top.

    Args:
        elevation: (rows, cols) elevation matrix, row 0 = north
        nodata: No-data sentinel (exact match)
        value_range: Precomputed range; computed when omitted

    Returns:
        (rows, cols) uint8 image where image row r is matrix row rows-1-r
    """
    if value_range is None:
        value_range = elevation_range(elevation, nodata)

    mask = nodata_mask(elevation, nodata)

    if value_range.span == 0:
        logger.warning(
            f"Flat elevation range ({value_range.min}); "
            f"rendering constant intensity {FLAT_INTENSITY}"
        )
        intensity = np.full(elevation.shape, FLAT_INTENSITY, dtype=np.uint8)
    else:
        with np.errstate(invalid="ignore"):
            scaled = (elevation - value_range.min) / value_range.span * float(INTENSITY_MAX)
        scaled = np.where(mask, 0.0, scaled)
        intensity = _round_half_up(scaled).astype(np.uint8)

    intensity[mask] = NODATA_INTENSITY
    return np.ascontiguousarray(np.flipud(intensity))


# ---------------------------------------------------------------------------
# Colour ramp
# ---------------------------------------------------------------------------


def apply_colormap(intensity: ByteArray) -> ByteArray:
    """
    Map intensity to the built-in pseudo-colour ramp.

    With v = intensity / 255: r = v * 255, g = (1 - |v - 0.5|) * 255
    (peaks at mid-range), b = (1 - v) * 128. Channels are truncated.
    """
    v = intensity.astype(np.float32) / _F255
    one = np.float32(1.0)

    r = v * _F255
    g = (one - np.abs(v - np.float32(0.5))) * _F255
    b = (one - v) * np.float32(128.0)

    return np.stack([r, g, b], axis=-1).astype(np.uint8)


# ---------------------------------------------------------------------------
# Hillshade
# ---------------------------------------------------------------------------


def compute_hillshade(
    intensity: ByteArray,
    cell_size: float = DEFAULT_CELL_SIZE,
    azimuth: float = DEFAULT_AZIMUTH,
    altitude: float = DEFAULT_ALTITUDE,
    z_factor: float = DEFAULT_Z_FACTOR,
) -> ByteArray:
    """
    Compute hillshade (shaded relief) from an intensity image.

    Uses Horn's method (1981) for slope and aspect. Samples outside the
    image reuse the nearest edge row/column.

    Args:
        intensity: (rows, cols) uint8 image (normalized, north at top)
        cell_size: Ground distance per pixel edge
        azimuth: Light azimuth in degrees from north
        altitude: Light altitude in degrees above horizon
        z_factor: Vertical exaggeration factor

    Returns:
        (rows, cols, 3) uint8 image with equal channels
    """
    z = np.pad(intensity.astype(np.float32), 1, mode="edge")

    z1, z2, z3 = z[:-2, :-2], z[:-2, 1:-1], z[:-2, 2:]
    z4, z5 = z[1:-1, :-2], z[1:-1, 2:]
    z6, z7, z8 = z[2:, :-2], z[2:, 1:-1], z[2:, 2:]

    two = np.float32(2.0)
    denom = np.float32(8.0) * np.float32(cell_size)

    dz_dx = ((z3 + two * z5 + z8) - (z1 + two * z4 + z6)) / denom
    dz_dy = ((z6 + two * z7 + z8) - (z1 + two * z2 + z3)) / denom

    if z_factor != 1.0:
        dz_dx *= np.float32(z_factor)
        dz_dy *= np.float32(z_factor)

    slope = np.arctan(np.sqrt(dz_dx * dz_dx + dz_dy * dz_dy))
    aspect = _aspect(dz_dx, dz_dy)

    deg = _PI / np.float32(180.0)
    az_rad = np.fmod(
        (np.float32(360.0) - np.float32(azimuth) + np.float32(90.0)) * deg,
        np.float32(2.0) * _PI,
    )
    alt_rad = np.float32(altitude) * deg

    illumination = np.cos(alt_rad) * np.cos(slope) + np.sin(alt_rad) * np.sin(slope) * np.cos(
        az_rad - aspect
    )
    illumination = np.maximum(illumination, np.float32(0.0))

    shade = _round_half_up(_F255 * illumination).astype(np.uint8)
    return np.stack([shade, shade, shade], axis=-1)


def _aspect(dz_dx: FloatArray, dz_dy: FloatArray) -> FloatArray:
    """Aspect in radians with quadrant correction; dz_dx == 0 maps to pi/2 or 3pi/2."""
    with np.errstate(divide="ignore", invalid="ignore"):
        base = np.arctan(dz_dy / -dz_dx)

    corrected = np.where(
        dz_dx > 0,
        base + _PI,
        np.where(dz_dy < 0, base + np.float32(2.0) * _PI, base),
    )
    vertical = np.where(dz_dy > 0, _PI / np.float32(2.0), np.float32(3.0) * _PI / np.float32(2.0))
    return np.where(dz_dx != 0, corrected, vertical).astype(np.float32)


# ---------------------------------------------------------------------------
# Compositing
# ---------------------------------------------------------------------------


def blend(color: ByteArray, shade: ByteArray) -> ByteArray:
    """
    Modulate a colour image by hillshade intensity.

    Raises:
        DimensionMismatchError: the two images differ in shape
    """
    if color.shape != shade.shape:
        raise DimensionMismatchError(
            ErrorMessages.DIMENSION_MISMATCH.format(color.shape, shade.shape)
        )

    s = shade[..., 0].astype(np.float32) / _F255
    out = color.astype(np.float32) * s[..., np.newaxis]
    return np.clip(out, np.float32(0.0), _F255).astype(np.uint8)


# ---------------------------------------------------------------------------
# Full renders
# ---------------------------------------------------------------------------


def render_grayscale(grid: ElevationGrid) -> ByteArray:
    """Render a grid as a (rows, cols) normalized grayscale image."""
    return normalize(grid.elevation, grid.header.nodata)


def render_hillshade(
    grid: ElevationGrid,
    azimuth: float = DEFAULT_AZIMUTH,
    altitude: float = DEFAULT_ALTITUDE,
    cell_size: float | None = None,
    z_factor: float = DEFAULT_Z_FACTOR,
) -> ByteArray:
    """
    Render a grid as a colour-ramped, hillshaded (rows, cols, 3) image.

    The cell size defaults to the grid header's ``cellsize``.
    """
    intensity = normalize(grid.elevation, grid.header.nodata)
    color = apply_colormap(intensity)
    shade = compute_hillshade(
        intensity,
        cell_size if cell_size is not None else grid.header.cell_size,
        azimuth,
        altitude,
        z_factor,
    )
    return blend(color, shade)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def encode_png(image: ByteArray) -> bytes:
    """Encode a (rows, cols) grayscale or (rows, cols, 3) RGB uint8 image as PNG."""
    if image.dtype != np.uint8 or not (
        image.ndim == 2 or (image.ndim == 3 and image.shape[2] == 3)
    ):
        raise EncodeError(
            ErrorMessages.ENCODE_FAILED.format(f"unsupported array {image.dtype} {image.shape}")
        )

    try:
        img = Image.fromarray(np.ascontiguousarray(image))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    except (ValueError, TypeError, OSError) as e:
        raise EncodeError(ErrorMessages.ENCODE_FAILED.format(e)) from e
    return buf.getvalue()


def write_png(data: bytes, path: str | Path) -> Path:
    """
    Write PNG bytes to path atomically.

    The bytes go to a temporary file in the same directory that then
    replaces the target, so a failed write never leaves a partial image.

    Raises:
        GridIOError: the file could not be written
    """
    path = Path(path)
    try:
        _atomic_write(data, path)
    except OSError as e:
        raise GridIOError(ErrorMessages.WRITE_FAILED.format(e), path) from e
    return path


@_retry_transient_io
def _atomic_write(data: bytes, path: Path) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp_name, _output_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _round_half_up(values: FloatArray) -> FloatArray:
    """Round non-negative values to nearest, ties away from zero."""
    floor = np.floor(values)
    return floor + (values - floor >= 0.5)


def _output_file_mode() -> int:
    """Permission bits a plain ``open()`` would give a new file (0o666 minus umask)."""
    # reading the umask means setting it, so serialize across worker threads
    with _UMASK_LOCK:
        umask = os.umask(0)
        os.umask(umask)
    return 0o666 & ~umask
