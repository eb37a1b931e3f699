#!/usr/bin/env python3
"""
DEM Render - Command Line Entry Point

Converts every Esri ASCII grid (.asc) under an input directory into a
grayscale or hillshaded PNG in an output directory, then prints a batch
summary. Exit status is 0 when no file failed, 1 otherwise, and 2 for
invalid options.
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from .config import RenderOptions, load_env, log_level
from .constants import RENDER_MODES, ServerConfig, SuccessMessages
from .core.errors import RenderError
from .core.renderer import DEMRenderer
from .models.responses import BatchResponse, ErrorResponse, format_response

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=ServerConfig.NAME,
        description="Convert ASC DEM files to grayscale or hillshaded PNGs",
    )
    parser.add_argument(
        "-i", "--input-dir", required=True, help="Input directory containing ASC files"
    )
    parser.add_argument("-o", "--output-dir", required=True, help="Output directory for PNG files")
    parser.add_argument(
        "-m",
        "--mode",
        default=None,
        help=f"Rendering mode: {' or '.join(RENDER_MODES)} (default: grayscale)",
    )
    parser.add_argument("--azimuth", type=float, default=None, help="Light azimuth (default 315)")
    parser.add_argument("--altitude", type=float, default=None, help="Light altitude (default 45)")
    parser.add_argument(
        "--cell-size",
        type=float,
        default=None,
        help="Cell size for hillshading (default: the grid's cellsize)",
    )
    parser.add_argument("--z-factor", type=float, default=None, help="Vertical exaggeration")
    parser.add_argument(
        "--fail-fast", action="store_true", help="Stop at the first file that fails"
    )
    parser.add_argument(
        "--output-mode",
        choices=["json", "text"],
        default="text",
        help="Summary format (default: text)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=ServerConfig.VERSION)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run a batch render; return the process exit status."""
    load_env()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=log_level(args.verbose))

    try:
        options = RenderOptions.from_env(
            mode=args.mode,
            azimuth=args.azimuth,
            altitude=args.altitude,
            cell_size=args.cell_size,
            z_factor=args.z_factor,
        )
    except ValidationError as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return 2

    renderer = DEMRenderer(options)

    try:
        batch = renderer.render_directory(
            args.input_dir, args.output_dir, fail_fast=args.fail_fast
        )
    except RenderError as e:
        logger.error(str(e))
        print(format_response(ErrorResponse(error=str(e)), args.output_mode))
        return 1

    response = BatchResponse.from_batch(
        batch,
        message=SuccessMessages.BATCH_COMPLETE.format(
            len(batch.results), batch.rendered, batch.skipped, batch.failed
        ),
    )
    print(format_response(response, args.output_mode))
    return 0 if batch.ok else 1


if __name__ == "__main__":
    sys.exit(main())
