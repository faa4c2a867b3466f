"""
Base exception classes for the Leadvault backend.

Each module should define its own exceptions that inherit from these bases.
Expected business conditions (insufficient credits, already-owned reveals)
are returned as values by the ledger; these classes cover the cases that
callers must handle as failures.
"""

from typing import Optional, Any


class LeadvaultError(Exception):
    """
    Base exception for all Leadvault errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(LeadvaultError):
    """Resource not found."""

    pass


class ValidationError(LeadvaultError):
    """Input validation failed."""

    pass


class AuthenticationError(LeadvaultError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(LeadvaultError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(LeadvaultError):
    """
    Error communicating with an external service.

    Raised for infrastructure failures (network, storage). Callers turn
    these into a generic, retryable message.
    """

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
