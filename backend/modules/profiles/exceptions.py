"""
Profiles module exceptions.
"""

from shared.exceptions import ExternalServiceError, NotFoundError, ValidationError


class ProfileNotFoundError(NotFoundError):
    """Raised when an operation needs a profile row that does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found for user {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )


class ProfileFetchFailedError(ExternalServiceError):
    """Raised when the profile store could not be read."""

    def __init__(self, message: str, user_id: str):
        super().__init__(
            f"Failed to load profile: {message}",
            service="supabase",
            code="PROFILE_FETCH_FAILED",
            details={"user_id": user_id},
        )


class ProtectedFieldError(ValidationError):
    """
    Raised on an attempt to write a ledger-owned column.

    credits_remaining and unlimited may only change through the credit ledger.
    """

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Fields can only be changed by the credit ledger: {', '.join(sorted(fields))}",
            code="PROTECTED_FIELD",
            details={"fields": sorted(fields)},
        )
