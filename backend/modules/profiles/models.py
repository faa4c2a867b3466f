"""
Profiles module data models.

A Profile is the entitlement and business-identity record kept one row per
user. ProfileState is the tagged result the ProfileStore publishes, so
consumers can tell "not provisioned yet" apart from "fetch failed" without
catching exceptions.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class SubscriptionStatus(str, Enum):
    """Subscription states mirrored from the billing provider."""

    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INACTIVE = "inactive"


# Columns only the credit ledger may write
LEDGER_OWNED_FIELDS = frozenset({"credits_remaining", "unlimited"})


class Profile(BaseModel):
    """
    One user's profile row.

    `credits_remaining` is never negative. When `unlimited` is set the
    ledger ignores the balance entirely.
    """

    user_id: str = Field(..., min_length=1, description="Owning user ID (profiles.id)")
    credits_remaining: int = Field(default=0, ge=0, description="Spendable reveal credits")
    unlimited: bool = Field(default=False, description="Bypass credit accounting")
    onboarding_complete: bool = Field(default=False)
    subscription_status: SubscriptionStatus = Field(default=SubscriptionStatus.INACTIVE)
    trial_granted: bool = Field(default=False, description="Signup bonus already granted")
    company_name: Optional[str] = None
    phone: Optional[str] = None
    service_cities: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @property
    def is_subscribed(self) -> bool:
        return self.subscription_status in (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING)


class ProfileUpdate(BaseModel):
    """Last-writer-wins update of descriptive profile fields."""

    company_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=40)
    service_cities: Optional[list[str]] = None

    model_config = {"extra": "forbid"}


# ---------------------------------------------------------------------------
# ProfileState
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProfileLoading:
    """A fetch is in flight."""

    user_id: Optional[str] = None


@dataclass(frozen=True)
class ProfileNotFound:
    """No profile row exists (yet), or nobody is signed in."""

    user_id: Optional[str] = None


@dataclass(frozen=True)
class ProfileReady:
    profile: Profile

    @property
    def user_id(self) -> str:
        return self.profile.user_id


@dataclass(frozen=True)
class ProfileFetchError:
    """The backend failed to answer; distinct from a missing row."""

    message: str
    user_id: Optional[str] = None


ProfileState = Union[ProfileLoading, ProfileNotFound, ProfileReady, ProfileFetchError]
