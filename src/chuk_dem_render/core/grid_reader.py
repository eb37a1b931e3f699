"""
Esri ASCII grid reader.

Parses the plain-text ``.asc`` format into a dense float64 elevation array
plus its header. The whole grid is materialized in memory.

Format::

    ncols         4
    nrows         3
    xllcorner     0.0
    yllcorner     0.0
    cellsize      30.0
    NODATA_value  -9999
    1 2 3 4
    ...

Header keys are case-insensitive and may appear in any order. The body
holds ``nrows * ncols`` values in row-major order, north to south.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray

from ..constants import (
    DEFAULT_NODATA,
    HEADER_KEY_NODATA,
    HEADER_KEYS_ALL,
    HEADER_KEYS_REQUIRED,
    HEADER_KEYS_X_ORIGIN,
    HEADER_KEYS_Y_ORIGIN,
    ErrorMessages,
)
from .errors import (
    ColumnCountMismatchError,
    GridIOError,
    MalformedHeaderError,
    MalformedValueError,
    RenderError,
    RowCountMismatchError,
)

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.floating[Any]]


@dataclass(frozen=True)
class GridHeader:
    """Header of an Esri ASCII grid."""

    ncols: int
    nrows: int
    xll: float
    yll: float
    registration: str  # "corner" or "center"
    cell_size: float
    nodata: float = DEFAULT_NODATA

    @property
    def shape(self) -> tuple[int, int]:
        return (self.nrows, self.ncols)

    @property
    def has_nodata(self) -> bool:
        """Whether a no-data sentinel was declared (the NaN default matches nothing)."""
        return not math.isnan(self.nodata)


@dataclass(frozen=True)
class ElevationGrid:
    """A parsed grid: header plus read-only (nrows, ncols) elevation array."""

    header: GridHeader
    elevation: FloatArray
    path: str | None = None

    @property
    def shape(self) -> tuple[int, int]:
        return self.header.shape


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def read_grid(path: str | Path) -> ElevationGrid:
    """
    Read and parse an Esri ASCII grid file.

    Args:
        path: Path to a ``.asc`` file

    Returns:
        ElevationGrid with the header and elevation matrix

    Raises:
        GridIOError: The file cannot be read or decoded
        GridFormatError: The content is not a valid grid
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise GridIOError(ErrorMessages.READ_FAILED.format(e), path) from e

    try:
        return parse_grid(text, path)
    except RenderError as e:
        raise e.with_path(path)


def parse_grid(text: str, path: str | Path | None = None) -> ElevationGrid:
    """
    Parse Esri ASCII grid text.

    Args:
        text: Full file content
        path: Optional source path, recorded on the result

    Returns:
        ElevationGrid
    """
    lines = text.splitlines()
    header, body_start = _parse_header(lines)
    values = _parse_body(lines[body_start:], header, first_line=body_start + 1)

    elevation = values.reshape(header.nrows, header.ncols)
    elevation.setflags(write=False)

    logger.debug(
        f"Parsed grid {header.nrows}x{header.ncols} "
        f"(cellsize {header.cell_size}, nodata {header.nodata})"
    )
    return ElevationGrid(
        header=header,
        elevation=elevation,
        path=str(path) if path is not None else None,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def _parse_header(lines: list[str]) -> tuple[GridHeader, int]:
    """Parse header lines; return the header and the index of the first body line."""
    fields: dict[str, str] = {}
    body_start = 0

    for idx, line in enumerate(lines):
        body_start = idx
        tokens = line.split()
        if not tokens:
            continue
        if _is_number(tokens[0]):
            break

        key = tokens[0].lower()
        if key not in HEADER_KEYS_ALL:
            raise MalformedHeaderError(ErrorMessages.UNKNOWN_HEADER_FIELD.format(tokens[0], idx + 1))
        if key in fields:
            raise MalformedHeaderError(ErrorMessages.DUPLICATE_HEADER_FIELD.format(key, idx + 1))
        if len(tokens) != 2:
            raise MalformedHeaderError(
                ErrorMessages.INVALID_HEADER_VALUE.format(" ".join(tokens[1:]), key)
            )
        fields[key] = tokens[1]
    else:
        body_start += 1

    for key in HEADER_KEYS_REQUIRED:
        if key not in fields:
            raise MalformedHeaderError(ErrorMessages.MISSING_HEADER_FIELD.format(key))

    x_key = _origin_key(fields, HEADER_KEYS_X_ORIGIN)
    y_key = _origin_key(fields, HEADER_KEYS_Y_ORIGIN)

    ncols = _int_field(fields, "ncols")
    nrows = _int_field(fields, "nrows")
    cell_size = _float_field(fields, "cellsize")
    if not math.isfinite(cell_size) or cell_size <= 0:
        raise MalformedHeaderError(ErrorMessages.INVALID_HEADER_VALUE.format(cell_size, "cellsize"))

    nodata = DEFAULT_NODATA
    if HEADER_KEY_NODATA in fields:
        nodata = _float_field(fields, HEADER_KEY_NODATA)

    header = GridHeader(
        ncols=ncols,
        nrows=nrows,
        xll=_float_field(fields, x_key),
        yll=_float_field(fields, y_key),
        registration="center" if x_key.endswith("center") else "corner",
        cell_size=cell_size,
        nodata=nodata,
    )
    return header, body_start


def _origin_key(fields: dict[str, str], candidates: list[str]) -> str:
    present = [k for k in candidates if k in fields]
    if not present:
        raise MalformedHeaderError(
            ErrorMessages.MISSING_HEADER_FIELD.format(" or ".join(candidates))
        )
    if len(present) > 1:
        raise MalformedHeaderError(ErrorMessages.CONFLICTING_HEADER_FIELDS.format(", ".join(present)))
    return present[0]


def _float_field(fields: dict[str, str], key: str) -> float:
    raw = fields[key]
    try:
        return float(raw)
    except ValueError:
        raise MalformedHeaderError(ErrorMessages.INVALID_HEADER_VALUE.format(raw, key)) from None


def _int_field(fields: dict[str, str], key: str) -> int:
    raw = fields[key]
    try:
        value = int(raw)
    except ValueError:
        as_float = _float_field(fields, key)
        if not as_float.is_integer():
            raise MalformedHeaderError(
                ErrorMessages.INVALID_HEADER_VALUE.format(raw, key)
            ) from None
        value = int(as_float)
    if value <= 0:
        raise MalformedHeaderError(ErrorMessages.INVALID_HEADER_VALUE.format(raw, key))
    return value


def _parse_body(lines: list[str], header: GridHeader, first_line: int) -> FloatArray:
    """Convert body tokens to a flat float64 array, checking the declared dimensions."""
    line_counts: list[tuple[int, int]] = []
    tokens: list[str] = []
    for offset, line in enumerate(lines):
        parts = line.split()
        if not parts:
            continue
        line_counts.append((first_line + offset, len(parts)))
        tokens.extend(parts)

    expected = header.nrows * header.ncols
    if len(tokens) != expected:
        bad = [(n, count) for n, count in line_counts if count != header.ncols]
        if not bad:
            raise RowCountMismatchError(
                ErrorMessages.ROW_COUNT_MISMATCH.format(header.nrows, len(line_counts)),
                expected=header.nrows,
                found=len(line_counts),
            )
        line_no, count = bad[0]
        raise ColumnCountMismatchError(
            ErrorMessages.COLUMN_COUNT_MISMATCH.format(line_no, header.ncols, count),
            line=line_no,
            expected=header.ncols,
            found=count,
        )

    try:
        return np.array(tokens, dtype=np.float64)
    except ValueError:
        _raise_malformed_value(lines, first_line)
        raise


def _raise_malformed_value(lines: list[str], first_line: int) -> None:
    for offset, line in enumerate(lines):
        for token in line.split():
            if not _is_number(token):
                raise MalformedValueError(
                    ErrorMessages.MALFORMED_VALUE.format(first_line + offset, token)
                )
