"""
Supabase-backed credit ledger.

Every charge is one call to the `charge_reveals` Postgres function
(migrations/002_ledger_functions.sql), which checks ownership, re-checks
the balance under a row lock, decrements and inserts the reveal rows in a
single transaction. The UNIQUE (listing_id, user_id) constraint on
listing_reveals backs the ownership check.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from postgrest.exceptions import APIError

from shared.repository import BaseRepository

from .exceptions import AccountNotFoundError, LedgerUnavailableError
from .models import (
    BulkChargeItem,
    BulkChargeResult,
    ChargeReason,
    ChargeResult,
    CreditBalance,
    GrantResult,
    RevealRecord,
)
from .service import unique_listing_ids, validate_cost, validate_listing_id

logger = logging.getLogger(__name__)

# charge_reveals status -> ChargeReason
_STATUS_REASONS = {
    "charged": ChargeReason.CHARGED,
    "already_owned": ChargeReason.ALREADY_OWNED,
    "insufficient_credits": ChargeReason.INSUFFICIENT_CREDITS,
    "ledger_race_lost": ChargeReason.LEDGER_RACE_LOST,
}


class SupabaseCreditLedger(BaseRepository[CreditBalance]):
    """Credit ledger that delegates atomic steps to Postgres functions."""

    async def get_balance(self, user_id: str) -> CreditBalance:
        try:
            result = (
                self._db.table("profiles")
                .select("id, credits_remaining, unlimited")
                .eq("id", user_id)
                .single()
                .execute()
            )
        except APIError as e:
            if self._is_missing_row(e):
                raise AccountNotFoundError(user_id)
            raise LedgerUnavailableError(e.message or str(e))

        if not result.data:
            raise AccountNotFoundError(user_id)
        return CreditBalance(
            user_id=user_id,
            credits_remaining=result.data.get("credits_remaining") or 0,
            unlimited=bool(result.data.get("unlimited")),
        )

    async def list_revealed(self, user_id: str) -> list[RevealRecord]:
        try:
            result = (
                self._db.table("listing_reveals")
                .select("listing_id, user_id, credit_cost, created_at")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as e:
            raise LedgerUnavailableError(e.message or str(e))
        return [RevealRecord(**row) for row in result.data or []]

    def _rpc(self, name: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            result = self._db.rpc(name, params).execute()
        except APIError as e:
            raise LedgerUnavailableError(e.message or str(e))
        if not isinstance(result.data, dict):
            raise LedgerUnavailableError(f"{name} returned no result")
        if result.data.get("status") == "account_not_found":
            raise AccountNotFoundError(params["p_user_id"])
        return result.data

    async def _charge(self, user_id: str, listing_ids: list[str], cost_per_item: int) -> dict[str, Any]:
        data = self._rpc(
            "charge_reveals",
            {
                "p_user_id": user_id,
                "p_listing_ids": listing_ids,
                "p_cost_per_item": cost_per_item,
            },
        )
        status = data.get("status")
        if status not in _STATUS_REASONS:
            raise LedgerUnavailableError(f"charge_reveals returned unknown status {status!r}")
        if status == "ledger_race_lost":
            logger.warning(f"Lost ledger race for {user_id}")
        elif status == "insufficient_credits":
            logger.warning(f"Insufficient credits for {user_id}: {data.get('total_cost')} required")
        return data

    @staticmethod
    def _balance(user_id: str, data: dict[str, Any]) -> CreditBalance:
        return CreditBalance(
            user_id=user_id,
            credits_remaining=data.get("credits_remaining") or 0,
            unlimited=bool(data.get("unlimited")),
        )

    @staticmethod
    def _records(user_id: str, data: dict[str, Any], cost_per_item: int) -> list[RevealRecord]:
        created_at = data.get("created_at") or datetime.now(timezone.utc)
        return [
            RevealRecord(
                listing_id=listing_id,
                user_id=user_id,
                credit_cost=cost_per_item,
                created_at=created_at,
            )
            for listing_id in data.get("charged") or []
        ]

    async def charge_one(self, user_id: str, listing_id: str, cost: int) -> ChargeResult:
        validate_cost(cost)
        validate_listing_id(listing_id)
        data = await self._charge(user_id, [listing_id], cost)
        reason = _STATUS_REASONS[data["status"]]
        balance = self._balance(user_id, data)
        records = self._records(user_id, data, cost) if reason == ChargeReason.CHARGED else []

        if reason == ChargeReason.CHARGED:
            logger.info(f"Charged {user_id} {data.get('total_cost', 0)} credit(s) for {listing_id}")
        return ChargeResult(
            charged=reason == ChargeReason.CHARGED,
            reason=reason,
            listing_id=listing_id,
            cost=(data.get("total_cost") or 0) if reason == ChargeReason.CHARGED else 0,
            balance=balance,
            record=records[0] if records else None,
        )

    async def charge_many(
        self,
        user_id: str,
        listing_ids: list[str],
        cost_per_item: int,
    ) -> BulkChargeResult:
        listing_ids = unique_listing_ids(listing_ids)
        validate_cost(cost_per_item)
        data = await self._charge(user_id, listing_ids, cost_per_item)
        reason = _STATUS_REASONS[data["status"]]
        balance = self._balance(user_id, data)
        committed = reason == ChargeReason.CHARGED

        owned = set(data.get("already_owned") or [])
        new = [i for i in listing_ids if i not in owned]
        item_cost = 0 if balance.unlimited else cost_per_item
        items = [
            BulkChargeItem(listing_id=i, charged=True, already_owned=True)
            if i in owned
            else BulkChargeItem(listing_id=i, charged=committed, cost=item_cost)
            for i in listing_ids
        ]

        if committed:
            logger.info(f"Charged {user_id} {data.get('total_cost', 0)} credit(s) for {len(new)} listing(s)")
        return BulkChargeResult(
            reason=reason,
            charged=len(new) if committed else 0,
            already_owned=len(owned),
            total_cost=data.get("total_cost") or 0,
            items=items,
            balance=balance,
            records=self._records(user_id, data, cost_per_item) if committed else [],
        )

    async def grant_credits(self, user_id: str, amount: int, reason: str) -> GrantResult:
        validate_cost(amount)
        data = self._rpc(
            "grant_credits",
            {"p_user_id": user_id, "p_amount": amount, "p_reason": reason},
        )
        logger.info(f"Granted {amount} credit(s) to {user_id}: {reason}")
        return GrantResult(
            user_id=user_id,
            amount=amount,
            reason=reason,
            balance_before=data["balance_before"],
            balance_after=data["balance_after"],
        )
