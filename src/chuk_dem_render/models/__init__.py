"""Response models for chuk-dem-render."""

from .responses import (
    BatchResponse,
    CapabilitiesResponse,
    ErrorResponse,
    GridInfoResponse,
    RenderResponse,
    StatusResponse,
    format_response,
)

__all__ = [
    "ErrorResponse",
    "RenderResponse",
    "BatchResponse",
    "GridInfoResponse",
    "StatusResponse",
    "CapabilitiesResponse",
    "format_response",
]
