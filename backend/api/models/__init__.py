"""API models package."""

from .errors import ErrorResponse, ErrorEnvelope, ERROR_RESPONSES, http_error

__all__ = [
    "ErrorResponse",
    "ErrorEnvelope",
    "ERROR_RESPONSES",
    "http_error",
]
