"""
Render configuration.

Options come from environment variables (optionally loaded from a .env
file by the entry points) and can be overridden per call.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_ALTITUDE,
    DEFAULT_AZIMUTH,
    DEFAULT_MODE,
    DEFAULT_Z_FACTOR,
    EnvVar,
)


class RenderOptions(BaseModel):
    """Options shared by every file of a render run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: str = Field(default=DEFAULT_MODE, description="Render mode (grayscale or hillshade)")
    azimuth: float = Field(
        default=DEFAULT_AZIMUTH, ge=0, le=360, description="Light azimuth in degrees from north"
    )
    altitude: float = Field(
        default=DEFAULT_ALTITUDE, ge=0, le=90, description="Light altitude above the horizon"
    )
    cell_size: float | None = Field(
        default=None,
        gt=0,
        description="Ground distance per cell edge; None uses the grid header's cellsize",
    )
    z_factor: float = Field(default=DEFAULT_Z_FACTOR, gt=0, description="Vertical exaggeration")

    @classmethod
    def from_env(cls, **overrides) -> "RenderOptions":
        """Build options from CHUK_DEM_RENDER_* variables, then apply non-None overrides."""
        values: dict = {}
        env_map = {
            "mode": EnvVar.MODE,
            "azimuth": EnvVar.AZIMUTH,
            "altitude": EnvVar.ALTITUDE,
            "cell_size": EnvVar.CELL_SIZE,
            "z_factor": EnvVar.Z_FACTOR,
        }
        for field, var in env_map.items():
            raw = os.environ.get(var)
            if raw is not None and raw.strip() != "":
                values[field] = raw.strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_overrides(self, **overrides) -> "RenderOptions":
        """Return a copy with the given non-None fields replaced (validated)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return RenderOptions(**data)


def load_env(path: str | Path | None = None) -> bool:
    """Load a .env file (default: ./.env) without overriding existing variables."""
    env_path = Path(path) if path is not None else Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
        return True
    return False


def log_level(verbose: bool = False) -> int:
    """Logging level from --verbose or CHUK_DEM_RENDER_LOG_LEVEL (default INFO)."""
    if verbose:
        return logging.DEBUG
    name = os.environ.get(EnvVar.LOG_LEVEL, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
