"""
In-memory credit ledger.

Keeps reveal records in process and writes balances through an
InMemoryProfileRepository. Used for local development (ledger_backend
"memory") and tests; production uses SupabaseCreditLedger.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable

from modules.profiles.models import Profile
from modules.profiles.repository import InMemoryProfileRepository

from .exceptions import (
    AccountNotFoundError,
    EmptyRevealSelectionError,
    InvalidCostError,
    InvalidListingIdError,
)
from .interfaces import ICreditLedger
from .models import (
    BulkChargeItem,
    BulkChargeResult,
    ChargeReason,
    ChargeResult,
    CreditBalance,
    GrantResult,
    RevealRecord,
)

logger = logging.getLogger(__name__)


def validate_cost(cost: int) -> None:
    """Reject anything but a positive integer credit amount."""
    if isinstance(cost, bool) or not isinstance(cost, int) or cost <= 0:
        raise InvalidCostError(cost, "Amount must be a positive integer")


def validate_listing_id(listing_id: str) -> None:
    if not isinstance(listing_id, str) or not listing_id.strip():
        raise InvalidListingIdError(listing_id)


def unique_listing_ids(listing_ids: list[str]) -> list[str]:
    """Drop duplicates while keeping request order. Every ID must be non-blank."""
    if not listing_ids:
        raise EmptyRevealSelectionError()
    for listing_id in listing_ids:
        validate_listing_id(listing_id)
    return list(dict.fromkeys(listing_ids))


def _balance_of(profile: Profile) -> CreditBalance:
    return CreditBalance(
        user_id=profile.user_id,
        credits_remaining=profile.credits_remaining,
        unlimited=profile.unlimited,
    )


class CreditLedger(ICreditLedger):
    """
    Ledger with one asyncio.Lock per user as the serialization point.

    Charges read the balance optimistically, then re-check it under the
    user's lock before committing. A charge whose re-check fails reports
    LEDGER_RACE_LOST. The decrement and the record insert happen with no
    suspension point in between, so they are applied together.
    """

    def __init__(
        self,
        profiles: InMemoryProfileRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._profiles = profiles
        self._clock = clock
        self._reveals: dict[str, dict[str, RevealRecord]] = defaultdict(dict)
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def _load(self, user_id: str) -> Profile:
        profile = await self._profiles.get_by_user_id(user_id)
        if profile is None:
            raise AccountNotFoundError(user_id)
        return profile

    async def get_balance(self, user_id: str) -> CreditBalance:
        return _balance_of(await self._load(user_id))

    async def list_revealed(self, user_id: str) -> list[RevealRecord]:
        records = self._reveals.get(user_id, {}).values()
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def _owns(self, user_id: str, listing_id: str) -> bool:
        return listing_id in self._reveals.get(user_id, {})

    def _commit(
        self,
        profile: Profile,
        listing_ids: list[str],
        cost_per_item: int,
    ) -> tuple[CreditBalance, list[RevealRecord]]:
        # No awaits in here: the balance write and the inserts land together.
        # Records are built before anything is written.
        now = self._clock()
        records = [
            RevealRecord(
                listing_id=listing_id,
                user_id=profile.user_id,
                credit_cost=cost_per_item,
                created_at=now,
            )
            for listing_id in listing_ids
        ]

        if not profile.unlimited:
            total = cost_per_item * len(listing_ids)
            profile = self._profiles.write_balance(profile.user_id, profile.credits_remaining - total)
        owned = self._reveals[profile.user_id]
        for record in records:
            owned[record.listing_id] = record
        return _balance_of(profile), records

    async def charge_one(self, user_id: str, listing_id: str, cost: int) -> ChargeResult:
        validate_cost(cost)
        validate_listing_id(listing_id)

        balance = await self.get_balance(user_id)
        if self._owns(user_id, listing_id):
            return ChargeResult(
                charged=False, reason=ChargeReason.ALREADY_OWNED, listing_id=listing_id, balance=balance
            )
        if not balance.can_afford(cost):
            logger.warning(f"Insufficient credits for {user_id}: need {cost}, have {balance.credits_remaining}")
            return ChargeResult(
                charged=False, reason=ChargeReason.INSUFFICIENT_CREDITS, listing_id=listing_id, balance=balance
            )

        async with self._locks[user_id]:
            profile = await self._load(user_id)
            current = _balance_of(profile)
            if self._owns(user_id, listing_id):
                return ChargeResult(
                    charged=False, reason=ChargeReason.ALREADY_OWNED, listing_id=listing_id, balance=current
                )
            if not current.can_afford(cost):
                logger.warning(f"Lost ledger race for {user_id} on {listing_id}")
                return ChargeResult(
                    charged=False, reason=ChargeReason.LEDGER_RACE_LOST, listing_id=listing_id, balance=current
                )
            new_balance, records = self._commit(profile, [listing_id], cost)

        logger.info(f"Charged {user_id} {cost} credit(s) for {listing_id}")
        return ChargeResult(
            charged=True,
            reason=ChargeReason.CHARGED,
            listing_id=listing_id,
            cost=0 if new_balance.unlimited else cost,
            balance=new_balance,
            record=records[0],
        )

    def _bulk_result(
        self,
        reason: ChargeReason,
        owned: list[str],
        new: list[str],
        cost_per_item: int,
        balance: CreditBalance,
        records: list[RevealRecord] | None = None,
    ) -> BulkChargeResult:
        committed = reason == ChargeReason.CHARGED
        total = 0 if balance.unlimited and committed else cost_per_item * len(new)
        items = [BulkChargeItem(listing_id=i, charged=True, already_owned=True) for i in owned]
        items += [
            BulkChargeItem(listing_id=i, charged=committed, cost=0 if balance.unlimited else cost_per_item)
            for i in new
        ]
        return BulkChargeResult(
            reason=reason,
            charged=len(new) if committed else 0,
            already_owned=len(owned),
            total_cost=total,
            items=items,
            balance=balance,
            records=records or [],
        )

    async def charge_many(
        self,
        user_id: str,
        listing_ids: list[str],
        cost_per_item: int,
    ) -> BulkChargeResult:
        listing_ids = unique_listing_ids(listing_ids)
        validate_cost(cost_per_item)

        balance = await self.get_balance(user_id)
        owned = [i for i in listing_ids if self._owns(user_id, i)]
        new = [i for i in listing_ids if not self._owns(user_id, i)]
        if not new:
            return self._bulk_result(ChargeReason.ALREADY_OWNED, owned, new, cost_per_item, balance)
        if not balance.can_afford(cost_per_item * len(new)):
            logger.warning(
                f"Insufficient credits for bulk reveal by {user_id}: "
                f"need {cost_per_item * len(new)}, have {balance.credits_remaining}"
            )
            return self._bulk_result(ChargeReason.INSUFFICIENT_CREDITS, owned, new, cost_per_item, balance)

        async with self._locks[user_id]:
            profile = await self._load(user_id)
            current = _balance_of(profile)
            owned = [i for i in listing_ids if self._owns(user_id, i)]
            new = [i for i in listing_ids if not self._owns(user_id, i)]
            if not new:
                return self._bulk_result(ChargeReason.ALREADY_OWNED, owned, new, cost_per_item, current)
            if not current.can_afford(cost_per_item * len(new)):
                logger.warning(f"Lost ledger race for bulk reveal by {user_id}")
                return self._bulk_result(ChargeReason.LEDGER_RACE_LOST, owned, new, cost_per_item, current)
            new_balance, records = self._commit(profile, new, cost_per_item)

        result = self._bulk_result(ChargeReason.CHARGED, owned, new, cost_per_item, new_balance, records)
        logger.info(f"Charged {user_id} {result.total_cost} credit(s) for {len(new)} listing(s)")
        return result

    async def grant_credits(self, user_id: str, amount: int, reason: str) -> GrantResult:
        validate_cost(amount)
        async with self._locks[user_id]:
            profile = await self._load(user_id)
            before = profile.credits_remaining
            self._profiles.write_balance(user_id, before + amount)

        logger.info(f"Granted {amount} credit(s) to {user_id}: {reason}")
        return GrantResult(
            user_id=user_id,
            amount=amount,
            reason=reason,
            balance_before=before,
            balance_after=before + amount,
        )
