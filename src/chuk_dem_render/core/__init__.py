"""Core grid reading, raster pipeline, and render orchestration."""
