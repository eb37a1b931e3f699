"""Tests for chuk_dem_render.tools.render.api.

Covers dem_render_file and dem_render_directory: JSON/text output modes,
per-call overrides, skipped modes, and error responses.
"""

import json

import pytest

from chuk_dem_render.config import RenderOptions
from chuk_dem_render.core.renderer import DEMRenderer
from chuk_dem_render.tools.render.api import register_render_tools

from conftest import SAMPLE_3X3


@pytest.fixture
def render_tools(capture_tools, mock_renderer):
    return capture_tools(register_render_tools, mock_renderer)


# ── Registration ───────────────────────────────────────────────────


class TestRegistration:
    def test_registers_two_tools(self, render_tools):
        assert set(render_tools) == {"dem_render_file", "dem_render_directory"}


# ── dem_render_file ────────────────────────────────────────────────


class TestRenderFile:
    async def test_grayscale_json(self, render_tools, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir)
        )
        data = json.loads(result)
        assert data["status"] == "ok"
        assert data["output_path"] == str(output_dir / "dem.png")
        assert data["shape"] == [3, 3]
        assert data["elevation_range"] == [1.0, 9.0]
        assert "Saved grayscale image" in data["message"]
        assert (output_dir / "dem.png").exists()

    async def test_creates_output_dir(self, render_tools, write_grid, tmp_path):
        path = write_grid("dem.asc", SAMPLE_3X3)
        out = tmp_path / "a" / "b"
        await render_tools["dem_render_file"](input_path=str(path), output_dir=str(out))
        assert (out / "dem.png").exists()

    async def test_hillshade(self, render_tools, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir), mode="hillshade"
        )
        data = json.loads(result)
        assert data["status"] == "ok"
        assert data["output_path"].endswith("dem_hillshade.png")
        assert data["cell_size"] == 30.0
        assert "hillshaded" in data["message"]

    async def test_cell_size_override(self, render_tools, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir), mode="hillshade", cell_size=2.5
        )
        assert json.loads(result)["cell_size"] == 2.5

    async def test_overrides_do_not_leak(self, render_tools, mock_renderer, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir), azimuth=90.0, cell_size=2.5
        )
        assert mock_renderer.options.azimuth == 315.0
        assert mock_renderer.options.cell_size is None

    async def test_unsupported_mode_skipped(self, render_tools, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir), mode="contour"
        )
        data = json.loads(result)
        assert data["status"] == "skipped"
        assert "contour" in data["message"]

    async def test_malformed_grid_error(self, render_tools, write_grid, output_dir):
        path = write_grid("bad.asc", "ncols 3\n")
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir)
        )
        data = json.loads(result)
        assert "error" in data
        assert "bad.asc" in data["error"]

    async def test_invalid_azimuth_error(self, render_tools, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir), azimuth=400.0
        )
        assert "error" in json.loads(result)

    async def test_text_mode(self, render_tools, write_grid, output_dir):
        path = write_grid("dem.asc", SAMPLE_3X3)
        result = await render_tools["dem_render_file"](
            input_path=str(path), output_dir=str(output_dir), output_mode="text"
        )
        assert result.startswith("OK ")
        assert "Shape: 3x3" in result

    async def test_text_mode_error(self, render_tools, tmp_path, output_dir):
        result = await render_tools["dem_render_file"](
            input_path=str(tmp_path / "missing.asc"),
            output_dir=str(output_dir),
            output_mode="text",
        )
        assert result.startswith("Error: ")


# ── dem_render_directory ───────────────────────────────────────────


class TestRenderDirectory:
    async def test_batch_json(self, render_tools, input_dir, output_dir):
        result = await render_tools["dem_render_directory"](
            input_dir=str(input_dir), output_dir=str(output_dir)
        )
        data = json.loads(result)
        assert data["total"] == 2
        assert data["rendered"] == 2
        assert data["failed"] == 0
        assert data["message"] == "Processed 2 files: 2 rendered, 0 skipped, 0 failed"
        assert [r["status"] for r in data["results"]] == ["ok", "ok"]

    async def test_failure_reported_per_file(self, render_tools, input_dir, write_grid, output_dir):
        write_grid("bad.asc", "ncols 3\n")
        result = await render_tools["dem_render_directory"](
            input_dir=str(input_dir), output_dir=str(output_dir), mode="hillshade"
        )
        data = json.loads(result)
        assert data["rendered"] == 2
        assert data["failed"] == 1
        assert (output_dir / "alpha_hillshade.png").exists()

    async def test_fail_fast_returns_error(self, render_tools, input_dir, write_grid, output_dir):
        write_grid("bad.asc", "ncols 3\n")
        result = await render_tools["dem_render_directory"](
            input_dir=str(input_dir), output_dir=str(output_dir), fail_fast=True
        )
        assert "bad.asc" in json.loads(result)["error"]

    async def test_missing_input_dir(self, render_tools, tmp_path, output_dir):
        result = await render_tools["dem_render_directory"](
            input_dir=str(tmp_path / "missing"), output_dir=str(output_dir)
        )
        assert "error" in json.loads(result)

    async def test_text_mode(self, render_tools, input_dir, output_dir):
        result = await render_tools["dem_render_directory"](
            input_dir=str(input_dir), output_dir=str(output_dir), output_mode="text"
        )
        assert result.splitlines()[0] == "Processed 2 files: 2 rendered, 0 skipped, 0 failed"
        assert "alpha.png" in result

    async def test_uses_configured_options(self, capture_tools, input_dir, output_dir):
        renderer = DEMRenderer(RenderOptions(cell_size=7.0))
        tools = capture_tools(register_render_tools, renderer)
        result = await tools["dem_render_directory"](
            input_dir=str(input_dir), output_dir=str(output_dir), mode="hillshade"
        )
        assert {r["cell_size"] for r in json.loads(result)["results"]} == {7.0}
