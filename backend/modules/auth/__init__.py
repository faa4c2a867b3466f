"""
Authentication module.

Validates Supabase access tokens on the server side.

Public API:
- IAuthService: Interface for auth operations
- AuthService: JWT-verifying implementation
- JWTPayload: Decoded token claims
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import JWTPayload
from .service import AuthService, get_auth_service, reset_auth_service
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    AuthNotConfiguredError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Implementation
    "AuthService",
    "get_auth_service",
    "reset_auth_service",
    # Models
    "JWTPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "AuthNotConfiguredError",
]
