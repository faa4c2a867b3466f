"""
Ledger module data models.

These models define the results of balance reads, charges and grants
exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ChargeReason(str, Enum):
    """Why a charge did or did not move credits."""

    CHARGED = "charged"
    ALREADY_OWNED = "already_owned"                # Replay; no credits moved
    INSUFFICIENT_CREDITS = "insufficient_credits"  # Balance too low at read time
    LEDGER_RACE_LOST = "ledger_race_lost"          # Balance too low at commit time


class CreditBalance(BaseModel):
    """A user's spendable balance."""

    user_id: str = Field(..., description="User ID")
    credits_remaining: int = Field(..., ge=0, description="Credits left")
    unlimited: bool = Field(default=False, description="Credit accounting bypassed")

    model_config = {"frozen": True}

    def can_afford(self, cost: int) -> bool:
        return self.unlimited or self.credits_remaining >= cost


class RevealRecord(BaseModel):
    """
    Proof that a user paid to unlock one listing.

    Immutable; at most one exists per (listing_id, user_id).
    """

    listing_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    credit_cost: int = Field(..., ge=1, description="Price at charge time")
    created_at: datetime

    model_config = {"frozen": True}


class ChargeResult(BaseModel):
    """Outcome of a single charge."""

    charged: bool
    reason: ChargeReason
    listing_id: str
    cost: int = Field(default=0, ge=0, description="Credits actually deducted")
    balance: CreditBalance
    record: Optional[RevealRecord] = None

    @property
    def is_insufficient(self) -> bool:
        """True for both flavours of "not enough credits"."""
        return self.reason in (ChargeReason.INSUFFICIENT_CREDITS, ChargeReason.LEDGER_RACE_LOST)


class BulkChargeItem(BaseModel):
    """
    Per-listing line of a bulk charge.

    Already-owned listings are reported as charged with cost 0.
    """

    listing_id: str
    charged: bool
    cost: int = Field(default=0, ge=0)
    already_owned: bool = False


class BulkChargeResult(BaseModel):
    """Outcome of an all-or-nothing bulk charge."""

    reason: ChargeReason
    charged: int = Field(default=0, ge=0, description="Listings newly charged")
    already_owned: int = Field(default=0, ge=0)
    total_cost: int = Field(default=0, ge=0, description="Credits deducted (or required, on failure)")
    items: list[BulkChargeItem] = Field(default_factory=list)
    balance: CreditBalance
    records: list[RevealRecord] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.reason in (ChargeReason.CHARGED, ChargeReason.ALREADY_OWNED)

    @property
    def is_insufficient(self) -> bool:
        return self.reason in (ChargeReason.INSUFFICIENT_CREDITS, ChargeReason.LEDGER_RACE_LOST)


class GrantResult(BaseModel):
    """Outcome of adding credits to a balance."""

    user_id: str
    amount: int = Field(..., gt=0)
    reason: str
    balance_before: int = Field(..., ge=0)
    balance_after: int = Field(..., ge=0)
