"""Tests for chuk_dem_render.tools.discovery.api.

Covers dem_describe_grid, dem_status and dem_capabilities in JSON and
text output modes.
"""

import json

import pytest

from chuk_dem_render.config import RenderOptions
from chuk_dem_render.constants import GRID_EXTENSION, RENDER_MODES, ServerConfig
from chuk_dem_render.core.renderer import DEMRenderer
from chuk_dem_render.tools.discovery.api import register_discovery_tools

from conftest import SAMPLE_3X3, make_grid_text


@pytest.fixture
def discovery_tools(capture_tools, mock_renderer):
    return capture_tools(register_discovery_tools, mock_renderer)


class TestRegistration:
    def test_registers_three_tools(self, discovery_tools):
        assert set(discovery_tools) == {"dem_describe_grid", "dem_status", "dem_capabilities"}


class TestDescribeGrid:
    async def test_json(self, discovery_tools, write_grid):
        path = write_grid("dem.asc", SAMPLE_3X3)
        data = json.loads(await discovery_tools["dem_describe_grid"](input_path=str(path)))
        assert data["ncols"] == 3
        assert data["nrows"] == 3
        assert data["cell_size"] == 30.0
        assert data["registration"] == "corner"
        assert data["nodata_value"] == -9999.0
        assert data["elevation_range"] == [1.0, 9.0]
        assert data["valid_pixels"] == 9
        assert data["message"] == "Grid 3x3 (cell size 30.0), 0 no-data cells"

    async def test_no_declared_nodata(self, discovery_tools, write_grid):
        path = write_grid("dem.asc", make_grid_text([[1, 2]], nodata=None))
        data = json.loads(await discovery_tools["dem_describe_grid"](input_path=str(path)))
        assert data["nodata_value"] is None

    async def test_all_nodata(self, discovery_tools, write_grid):
        path = write_grid("void.asc", make_grid_text([[-9999, -9999]]))
        data = json.loads(await discovery_tools["dem_describe_grid"](input_path=str(path)))
        assert data["elevation_range"] is None
        assert data["nodata_pixels"] == 2

    async def test_text(self, discovery_tools, write_grid):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await discovery_tools["dem_describe_grid"](
            input_path=str(path), output_mode="text"
        )
        assert "Size: 3 rows x 3 cols" in result
        assert "Elevation: 1.00 to 9.00" in result

    async def test_malformed_error(self, discovery_tools, write_grid):
        path = write_grid("bad.asc", SAMPLE_3X3.replace("7 8 9\n", ""))
        data = json.loads(await discovery_tools["dem_describe_grid"](input_path=str(path)))
        assert "Expected 3 rows of data, found 2" in data["error"]

    async def test_missing_file_error(self, discovery_tools, tmp_path):
        data = json.loads(
            await discovery_tools["dem_describe_grid"](input_path=str(tmp_path / "none.asc"))
        )
        assert "error" in data


class TestStatus:
    async def test_defaults(self, discovery_tools):
        data = json.loads(await discovery_tools["dem_status"]())
        assert data["server"] == ServerConfig.NAME
        assert data["version"] == ServerConfig.VERSION
        assert data["default_mode"] == "grayscale"
        assert data["azimuth"] == 315.0
        assert data["altitude"] == 45.0
        assert data["cell_size"] is None
        assert data["z_factor"] == 1.0

    async def test_reflects_options(self, capture_tools):
        renderer = DEMRenderer(RenderOptions(mode="hillshade", cell_size=10.0))
        tools = capture_tools(register_discovery_tools, renderer)
        data = json.loads(await tools["dem_status"]())
        assert data["default_mode"] == "hillshade"
        assert data["cell_size"] == 10.0

    async def test_text(self, discovery_tools):
        result = await discovery_tools["dem_status"](output_mode="text")
        assert result.startswith(f"{ServerConfig.NAME} v{ServerConfig.VERSION}")
        assert "Cell size: from grid header" in result


class TestCapabilities:
    async def test_json(self, discovery_tools):
        data = json.loads(await discovery_tools["dem_capabilities"]())
        assert data["render_modes"] == RENDER_MODES
        assert data["input_extension"] == GRID_EXTENSION
        assert data["output_formats"] == ["png"]
        assert data["tool_count"] == 5
        assert "dem_render_directory" in data["llm_guidance"]

    async def test_text(self, discovery_tools):
        result = await discovery_tools["dem_capabilities"](output_mode="text")
        assert "Modes: grayscale, hillshade (default grayscale)" in result
        assert "Input: *.asc" in result
