"""
Profile repositories.

- ProfileRepository: reads and writes the Supabase `profiles` table.
- InMemoryProfileRepository: dict-backed twin used by the in-memory
  credit ledger and by tests.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.repository import BaseRepository

from .exceptions import ProfileFetchFailedError, ProfileNotFoundError, ProtectedFieldError
from .models import LEDGER_OWNED_FIELDS, Profile, SubscriptionStatus

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = (
    "id, credits_remaining, unlimited, onboarding_complete, subscription_status, "
    "trial_granted, company_name, phone, service_cities, created_at, updated_at"
)


def _check_writable(fields: dict[str, Any]) -> None:
    protected = LEDGER_OWNED_FIELDS.intersection(fields)
    if protected:
        raise ProtectedFieldError(list(protected))


def map_profile_row(row: dict[str, Any]) -> Profile:
    """Map a `profiles` row to a Profile."""
    status = row.get("subscription_status") or SubscriptionStatus.INACTIVE.value
    try:
        subscription_status = SubscriptionStatus(status)
    except ValueError:
        logger.debug(f"Unknown subscription status {status!r} for {row['id']}")
        subscription_status = SubscriptionStatus.INACTIVE

    return Profile(
        user_id=row["id"],
        credits_remaining=row.get("credits_remaining") or 0,
        unlimited=bool(row.get("unlimited")),
        onboarding_complete=bool(row.get("onboarding_complete")),
        subscription_status=subscription_status,
        trial_granted=bool(row.get("trial_granted")),
        company_name=row.get("company_name"),
        phone=row.get("phone"),
        service_cities=row.get("service_cities") or [],
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for the `profiles` table.

    A missing row is a normal answer (None), any other PostgREST error
    is raised as ProfileFetchFailedError.
    """

    async def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        try:
            result = (
                self._db.table("profiles")
                .select(PROFILE_COLUMNS)
                .eq("id", user_id)
                .single()
                .execute()
            )
        except APIError as e:
            if self._is_missing_row(e):
                return None
            raise ProfileFetchFailedError(e.message or str(e), user_id)

        if not result.data:
            return None
        return map_profile_row(result.data)

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> Profile:
        _check_writable(fields)
        return await self._update(user_id, dict(fields))

    async def complete_onboarding(self, user_id: str) -> Profile:
        return await self._update(user_id, {"onboarding_complete": True})

    async def _update(self, user_id: str, data: dict[str, Any]) -> Profile:
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self._db.table("profiles").update(data).eq("id", user_id).execute()
        except APIError as e:
            raise ProfileFetchFailedError(e.message or str(e), user_id)

        if not result.data:
            raise ProfileNotFoundError(user_id)
        return map_profile_row(result.data[0])


class InMemoryProfileRepository:
    """
    Dict-backed profile storage.

    Balance writes go through write_balance(), which only the in-memory
    credit ledger calls.
    """

    def __init__(self, profiles: Optional[list[Profile]] = None):
        self._profiles: dict[str, Profile] = {}
        for profile in profiles or []:
            self.save(profile)

    def save(self, profile: Profile) -> Profile:
        """Insert or replace a profile (provisioning / test setup)."""
        self._profiles[profile.user_id] = profile
        return profile

    async def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get(user_id)

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> Profile:
        _check_writable(fields)
        return self._update(user_id, fields)

    async def complete_onboarding(self, user_id: str) -> Profile:
        return self._update(user_id, {"onboarding_complete": True})

    def _update(self, user_id: str, fields: dict[str, Any]) -> Profile:
        profile = self._profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        updated = profile.model_copy(
            update={**fields, "updated_at": datetime.now(timezone.utc)}
        )
        self._profiles[user_id] = updated
        return updated

    def write_balance(self, user_id: str, credits_remaining: int) -> Profile:
        """Set the balance. Reserved for CreditLedger."""
        if credits_remaining < 0:
            raise ValueError("credits_remaining cannot be negative")
        return self._update(user_id, {"credits_remaining": credits_remaining})
