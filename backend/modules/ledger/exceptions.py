"""
Ledger module exceptions.

Insufficient credits and already-owned listings are ordinary results of
a charge (see ChargeReason). These exceptions cover invalid input and
infrastructure failures, plus InsufficientCreditsError for callers that
prefer raising, such as RevealOutcome.raise_for_status().
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, LeadvaultError, NotFoundError, ValidationError


class LedgerError(LeadvaultError):
    """Base exception for ledger-related errors."""

    pass


class InsufficientCreditsError(LedgerError):
    """
    Raised when a user doesn't have enough credits for a reveal.

    Kept distinct from every other failure so the UI can offer a top-up.
    """

    def __init__(
        self,
        required: int,
        available: int,
        user_id: Optional[str] = None,
    ):
        message = f"Insufficient credits. Required: {required}, available: {available}"
        super().__init__(
            message,
            code="INSUFFICIENT_CREDITS",
            details={
                "required": required,
                "available": available,
                "shortfall": max(required - available, 0),
            },
        )
        if user_id:
            self.details["user_id"] = user_id


class InvalidCostError(ValidationError):
    """Raised when a reveal cost or grant amount is not a positive integer."""

    def __init__(self, amount: int, reason: str):
        super().__init__(
            f"Invalid amount: {amount}. {reason}",
            code="INVALID_AMOUNT",
            details={"amount": amount, "reason": reason},
        )


class InvalidListingIdError(ValidationError):
    """Raised when a listing ID is missing or blank."""

    def __init__(self, listing_id: object):
        super().__init__(
            f"Invalid listing ID: {listing_id!r}",
            code="INVALID_LISTING_ID",
            details={"listing_id": listing_id if isinstance(listing_id, str) else None},
        )


class EmptyRevealSelectionError(ValidationError):
    """Raised when a bulk reveal is requested with no listings."""

    def __init__(self):
        super().__init__(
            "Select at least one listing to reveal",
            code="EMPTY_SELECTION",
        )


class AccountNotFoundError(NotFoundError):
    """Raised when the user has no profile row to charge against."""

    def __init__(self, user_id: str):
        super().__init__(
            f"No credit account for user {user_id}",
            code="ACCOUNT_NOT_FOUND",
            details={"user_id": user_id},
        )


class LedgerUnavailableError(ExternalServiceError):
    """Raised when the ledger's backing store cannot be reached."""

    def __init__(self, message: str, service: str = "supabase"):
        super().__init__(
            f"Credit ledger unavailable: {message}",
            service=service,
            code="LEDGER_UNAVAILABLE",
        )
