"""
Credit ledger interface.

The ledger is the only writer of a profile's credit balance. Other
modules, the reveal service in particular, depend on ICreditLedger and
not on a concrete backend.
"""

from typing import Protocol, runtime_checkable

from .models import BulkChargeResult, ChargeResult, CreditBalance, GrantResult, RevealRecord


@runtime_checkable
class ICreditLedger(Protocol):
    """
    Interface for credit accounting.

    Charges are atomic: the balance decrement and the reveal record
    insert either both happen or neither does. Concurrent charges for
    one user can never drive the balance below zero.
    """

    async def get_balance(self, user_id: str) -> CreditBalance:
        """
        Get a user's current balance.

        Raises:
            AccountNotFoundError: If the user has no profile
            LedgerUnavailableError: If the store cannot be reached
        """
        ...

    async def list_revealed(self, user_id: str) -> list[RevealRecord]:
        """
        List every reveal the user owns, newest first.

        Raises:
            LedgerUnavailableError: If the store cannot be reached
        """
        ...

    async def charge_one(self, user_id: str, listing_id: str, cost: int) -> ChargeResult:
        """
        Charge for one listing.

        Args:
            user_id: Supabase user ID
            listing_id: Listing being revealed
            cost: Credits to deduct (must be positive)

        Returns:
            ChargeResult. A repeat call for an owned listing returns
            ALREADY_OWNED without touching the balance. Too few credits
            returns INSUFFICIENT_CREDITS or LEDGER_RACE_LOST.

        Raises:
            InvalidCostError: If cost is not positive
            AccountNotFoundError: If the user has no profile
            LedgerUnavailableError: If the store cannot be reached
        """
        ...

    async def charge_many(
        self,
        user_id: str,
        listing_ids: list[str],
        cost_per_item: int,
    ) -> BulkChargeResult:
        """
        Charge for several listings, all or nothing.

        Already-owned listings are skipped for free. If the remaining
        total exceeds the balance, nothing is charged or recorded.

        Raises:
            EmptyRevealSelectionError: If listing_ids is empty
            InvalidCostError: If cost_per_item is not positive
            AccountNotFoundError: If the user has no profile
            LedgerUnavailableError: If the store cannot be reached
        """
        ...

    async def grant_credits(self, user_id: str, amount: int, reason: str) -> GrantResult:
        """
        Atomically add credits to a balance (top-ups, signup bonus).

        Raises:
            InvalidCostError: If amount is not positive
            AccountNotFoundError: If the user has no profile
            LedgerUnavailableError: If the store cannot be reached
        """
        ...
