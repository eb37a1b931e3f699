"""Shared test fixtures for chuk-dem-render."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from chuk_dem_render.config import RenderOptions
from chuk_dem_render.core.grid_reader import parse_grid

SAMPLE_3X3 = """ncols 3
nrows 3
xllcorner 0.0
yllcorner 0.0
cellsize 30.0
NODATA_value -9999
1 2 3
4 5 6
7 8 9
"""

FLAT_2X2 = """ncols 2
nrows 2
xllcorner 0.0
yllcorner 0.0
cellsize 30.0
NODATA_value -9999
5 5
5 5
"""


def make_grid_text(
    values,
    cellsize: float = 30.0,
    nodata: float | None = -9999.0,
    xkey: str = "xllcorner",
    ykey: str = "yllcorner",
) -> str:
    """Build Esri ASCII grid text from a 2-D sequence."""
    arr = np.asarray(values)
    lines = [
        f"ncols {arr.shape[1]}",
        f"nrows {arr.shape[0]}",
        f"{xkey} 100.0",
        f"{ykey} 200.0",
        f"cellsize {cellsize}",
    ]
    if nodata is not None:
        lines.append(f"NODATA_value {nodata:g}")
    for row in arr:
        lines.append(" ".join(f"{v:g}" for v in row))
    return "\n".join(lines) + "\n"


@pytest.fixture
def sample_grid():
    """3x3 grid with values 1..9 and nodata -9999."""
    return parse_grid(SAMPLE_3X3)


@pytest.fixture
def flat_grid():
    """2x2 grid where every cell is 5."""
    return parse_grid(FLAT_2X2)


@pytest.fixture
def sample_elevation():
    """50x40 elevation array with values 100-500m."""
    np.random.seed(42)
    return np.random.uniform(100, 500, (50, 40))


@pytest.fixture
def write_grid(tmp_path):
    """Write grid text under tmp_path/input and return the path."""

    def _write(name: str, text: str):
        path = tmp_path / "input" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def input_dir(write_grid, tmp_path):
    """Input directory with two valid grids, one nested, plus a non-grid file."""
    write_grid("alpha.asc", SAMPLE_3X3)
    write_grid("nested/beta.asc", make_grid_text([[10, 20], [30, 40], [50, 60]]))
    write_grid("notes.txt", "not a grid")
    return tmp_path / "input"


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output"


@pytest.fixture
def mock_renderer():
    """DEMRenderer with default options."""
    from chuk_dem_render.core.renderer import DEMRenderer

    return DEMRenderer(RenderOptions())


@pytest.fixture
def capture_tools():
    """Return a helper that registers tools on a mock MCP and returns name -> coroutine."""

    def _capture(register, renderer):
        tools = {}
        mcp = MagicMock()

        def capture_tool(**kwargs):
            def decorator(fn):
                tools[fn.__name__] = fn
                return fn

            return decorator

        mcp.tool = capture_tool
        register(mcp, renderer)
        return tools

    return _capture
