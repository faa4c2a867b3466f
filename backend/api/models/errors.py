"""
Error response models.

Standardized error responses for the API, and the mapping from module
exceptions to HTTP status codes.
"""

from typing import Any, Optional

from fastapi import HTTPException, status
from pydantic import BaseModel

from modules.ledger.exceptions import InsufficientCreditsError
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    LeadvaultError,
    NotFoundError,
    ValidationError,
)


class ErrorResponse(BaseModel):
    """Standard error response format (the `detail` of an HTTPException)."""

    error: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorEnvelope(BaseModel):
    detail: ErrorResponse


# Checked in order; the first matching base class wins
_STATUS_CODES: list[tuple[type[LeadvaultError], int]] = [
    (InsufficientCreditsError, status.HTTP_402_PAYMENT_REQUIRED),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ExternalServiceError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def http_error(error: LeadvaultError) -> HTTPException:
    """Convert a module exception into an HTTPException carrying error.to_dict()."""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.to_dict())
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.to_dict())


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorEnvelope, "description": "Missing or invalid token"},
    402: {"model": ErrorEnvelope, "description": "Insufficient credits"},
    404: {"model": ErrorEnvelope, "description": "No credit account"},
    422: {"description": "Invalid request"},
    503: {"model": ErrorEnvelope, "description": "Ledger unavailable, retry later"},
}
