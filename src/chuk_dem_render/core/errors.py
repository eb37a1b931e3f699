"""
Error types raised by the render pipeline.

Every error may carry the path of the grid being processed; when it does,
the path prefixes the message so callers can report failures without a
traceback.
"""

from pathlib import Path


class RenderError(Exception):
    """Base class for all render pipeline failures."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def with_path(self, path: str | Path) -> "RenderError":
        """Attach the offending file path (if not already set) and return self."""
        if self.path is None:
            self.path = str(path)
        return self

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class GridFormatError(RenderError, ValueError):
    """The grid text does not follow the Esri ASCII grid format."""


class MalformedHeaderError(GridFormatError):
    pass


class RowCountMismatchError(GridFormatError):
    def __init__(self, message: str, expected: int, found: int, path=None) -> None:
        super().__init__(message, path)
        self.expected = expected
        self.found = found


class ColumnCountMismatchError(GridFormatError):
    def __init__(self, message: str, line: int, expected: int, found: int, path=None) -> None:
        super().__init__(message, path)
        self.line = line
        self.expected = expected
        self.found = found


class MalformedValueError(GridFormatError):
    pass


class DegenerateRangeError(RenderError, ValueError):
    """No valid elevation values, so min/max scaling is undefined."""


class DimensionMismatchError(RenderError, ValueError):
    """Two images that must be blended have different shapes."""


class GridIOError(RenderError, OSError):
    """Reading a grid or writing an image failed."""


class EncodeError(RenderError):
    """Image serialization failed."""
