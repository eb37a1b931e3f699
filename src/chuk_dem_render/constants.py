"""
Constants for chuk-dem-render.

All magic strings, render defaults, and message templates live here.
"""


class ServerConfig:
    NAME = "chuk-dem-render"
    VERSION = "0.1.0"
    DESCRIPTION = "Esri ASCII Grid to Grayscale and Shaded-Relief PNG Renderer"


class RenderMode:
    GRAYSCALE = "grayscale"
    HILLSHADE = "hillshade"


class EnvVar:
    MODE = "CHUK_DEM_RENDER_MODE"
    AZIMUTH = "CHUK_DEM_RENDER_AZIMUTH"
    ALTITUDE = "CHUK_DEM_RENDER_ALTITUDE"
    CELL_SIZE = "CHUK_DEM_RENDER_CELL_SIZE"
    Z_FACTOR = "CHUK_DEM_RENDER_Z_FACTOR"
    LOG_LEVEL = "CHUK_DEM_RENDER_LOG_LEVEL"
    MCP_STDIO = "MCP_STDIO"


class RenderStatus:
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


RENDER_MODES = [RenderMode.GRAYSCALE, RenderMode.HILLSHADE]
DEFAULT_MODE = RenderMode.GRAYSCALE

# Esri ASCII grid format
GRID_EXTENSION = ".asc"
HEADER_KEYS_REQUIRED = ["ncols", "nrows", "cellsize"]
HEADER_KEYS_X_ORIGIN = ["xllcorner", "xllcenter"]
HEADER_KEYS_Y_ORIGIN = ["yllcorner", "yllcenter"]
HEADER_KEY_NODATA = "nodata_value"
HEADER_KEYS_ALL = (
    HEADER_KEYS_REQUIRED + HEADER_KEYS_X_ORIGIN + HEADER_KEYS_Y_ORIGIN + [HEADER_KEY_NODATA]
)
DEFAULT_NODATA = float("nan")

# Terrain defaults
DEFAULT_AZIMUTH = 315.0
DEFAULT_ALTITUDE = 45.0
DEFAULT_CELL_SIZE = 30.0
DEFAULT_Z_FACTOR = 1.0

# Intensity scale
INTENSITY_MAX = 255
NODATA_INTENSITY = 0
FLAT_INTENSITY = 0

# Output naming
GRAYSCALE_SUFFIX = ".png"
HILLSHADE_SUFFIX = "_hillshade.png"
OUTPUT_FORMATS = ["png"]

# Write retry (transient OS conditions only)
RETRY_ATTEMPTS = 3
RETRY_WAIT_MIN = 1
RETRY_WAIT_MAX = 10


class ErrorMessages:
    MISSING_HEADER_FIELD = "Missing required header field '{}'"
    INVALID_HEADER_VALUE = "Invalid value '{}' for header field '{}'"
    UNKNOWN_HEADER_FIELD = "Unknown header field '{}' on line {}"
    DUPLICATE_HEADER_FIELD = "Duplicate header field '{}' on line {}"
    CONFLICTING_HEADER_FIELDS = "Conflicting header fields: {}"
    ROW_COUNT_MISMATCH = "Expected {} rows of data, found {}"
    COLUMN_COUNT_MISMATCH = "Line {}: expected {} values per row, found {}"
    MALFORMED_VALUE = "Line {}: invalid elevation value '{}'"
    DEGENERATE_RANGE = "All {} cells are no-data ({}); elevation range is undefined"
    DIMENSION_MISMATCH = "Image dimensions differ: colour {} vs shade {}"
    READ_FAILED = "Cannot read grid: {}"
    WRITE_FAILED = "Cannot write image: {}"
    ENCODE_FAILED = "PNG encoding failed: {}"
    INPUT_NOT_DIRECTORY = "Input directory does not exist: {}"
    UNSUPPORTED_MODE = "Unsupported mode '{}'. Available: {}"


class SuccessMessages:
    GRAYSCALE_SAVED = "Saved grayscale image to {}"
    HILLSHADE_SAVED = "Saved hillshaded image to {}"
    MODE_SKIPPED = "Skipped {}: unsupported mode '{}'"
    BATCH_COMPLETE = "Processed {} files: {} rendered, {} skipped, {} failed"
    GRID_DESCRIBE = "Grid {}x{} (cell size {}), {} no-data cells"
