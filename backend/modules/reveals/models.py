"""
Reveals module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from modules.ledger.exceptions import InsufficientCreditsError
from modules.ledger.models import BulkChargeItem, ChargeReason, CreditBalance


class ListingType(str, Enum):
    """Kinds of listing that can be revealed."""

    JUST_LISTED = "just_listed"
    SOLD = "sold"


# Credits per reveal, by listing type
REVEAL_COSTS: dict[ListingType, int] = {
    ListingType.JUST_LISTED: 1,
    ListingType.SOLD: 1,
}


class RevealStatus(str, Enum):
    REVEALED = "revealed"
    ALREADY_OWNED = "already_owned"
    INSUFFICIENT_CREDITS = "insufficient_credits"


def status_for(reason: ChargeReason) -> RevealStatus:
    """Collapse ledger reasons into what the caller acts on."""
    if reason == ChargeReason.CHARGED:
        return RevealStatus.REVEALED
    if reason == ChargeReason.ALREADY_OWNED:
        return RevealStatus.ALREADY_OWNED
    return RevealStatus.INSUFFICIENT_CREDITS


class RevealOutcome(BaseModel):
    """Result of revealing one listing."""

    listing_id: str
    status: RevealStatus
    reason: ChargeReason
    cost: int = Field(default=0, ge=0, description="Credits deducted")
    required: int = Field(default=0, ge=0, description="Price of the reveal")
    balance: CreditBalance

    @property
    def succeeded(self) -> bool:
        return self.status != RevealStatus.INSUFFICIENT_CREDITS

    def raise_for_status(self) -> "RevealOutcome":
        """Raise InsufficientCreditsError if the reveal was not affordable."""
        if not self.succeeded:
            raise InsufficientCreditsError(
                required=self.required,
                available=self.balance.credits_remaining,
                user_id=self.balance.user_id,
            )
        return self


class BulkRevealOutcome(BaseModel):
    """Result of revealing several listings at one price."""

    status: RevealStatus
    reason: ChargeReason
    revealed: int = Field(default=0, ge=0, description="Listings newly revealed")
    already_owned: int = Field(default=0, ge=0)
    total_cost: int = Field(default=0, ge=0, description="Credits deducted, or required on failure")
    items: list[BulkChargeItem] = Field(default_factory=list)
    balance: CreditBalance

    @property
    def succeeded(self) -> bool:
        return self.status != RevealStatus.INSUFFICIENT_CREDITS

    def raise_for_status(self) -> "BulkRevealOutcome":
        if not self.succeeded:
            raise InsufficientCreditsError(
                required=self.total_cost,
                available=self.balance.credits_remaining,
                user_id=self.balance.user_id,
            )
        return self


class LowCreditWarning(BaseModel):
    """Emitted when a limited balance drops to the warning threshold or below."""

    user_id: str
    credits_remaining: int
    threshold: int
    created_at: datetime

    @property
    def message(self) -> str:
        return (
            f"You have {self.credits_remaining} credits left. "
            "Top up now to avoid interruptions."
        )


class RevealRequest(BaseModel):
    """Body of a single reveal request."""

    listing_type: Optional[ListingType] = None
    cost: Optional[int] = Field(None, ge=1, description="Explicit price, overrides listing_type")


class BulkRevealRequest(BaseModel):
    """Body of a bulk reveal request."""

    listing_ids: list[Annotated[str, Field(min_length=1)]] = Field(..., max_length=500)
    listing_type: Optional[ListingType] = None
    cost: Optional[int] = Field(None, ge=1, description="Explicit price per listing")
