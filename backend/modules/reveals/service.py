"""
Reveal service.

Listing-shaped operations on top of the credit ledger: prices a reveal,
charges it, and keeps the revealed-listings cache and the balance views
in step with what the ledger confirmed.
"""

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from modules.ledger.interfaces import ICreditLedger
from modules.ledger.models import ChargeReason, CreditBalance, RevealRecord
from modules.ledger.service import validate_cost
from shared.observable import Unsubscribe

from .balance import DEFAULT_COOLDOWN_SECONDS, DEFAULT_LOW_CREDIT_THRESHOLD, BalanceView
from .cache import DEFAULT_TTL_SECONDS, RevealedListingsCache
from .models import (
    REVEAL_COSTS,
    BulkRevealOutcome,
    ListingType,
    LowCreditWarning,
    RevealOutcome,
    status_for,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_BALANCE_VIEWS = 1024


class RevealService:
    """
    Reveal operations for any number of users.

    Expected business conditions come back as outcomes: an unaffordable
    reveal is RevealStatus.INSUFFICIENT_CREDITS, a repeat is
    ALREADY_OWNED. Only invalid input and infrastructure failures raise.
    """

    def __init__(
        self,
        ledger: ICreditLedger,
        default_cost: int = 1,
        costs: Optional[dict[ListingType, int]] = None,
        low_credit_threshold: int = DEFAULT_LOW_CREDIT_THRESHOLD,
        low_credit_cooldown: float = DEFAULT_COOLDOWN_SECONDS,
        cache_ttl: float = DEFAULT_TTL_SECONDS,
        max_balance_views: int = DEFAULT_MAX_BALANCE_VIEWS,
        clock: Callable[[], float] = time.monotonic,
    ):
        validate_cost(default_cost)
        self._ledger = ledger
        self._default_cost = default_cost
        self._costs = dict(REVEAL_COSTS if costs is None else costs)
        self._threshold = low_credit_threshold
        self._cooldown = low_credit_cooldown
        self._clock = clock
        self._cache = RevealedListingsCache(ledger, ttl_seconds=cache_ttl, clock=clock)
        self._max_views = max_balance_views
        # Least recently used first
        self._views: OrderedDict[str, BalanceView] = OrderedDict()

    @property
    def cache(self) -> RevealedListingsCache:
        return self._cache

    def resolve_cost(self, listing_type: Optional[ListingType] = None, cost: Optional[int] = None) -> int:
        """
        Price of one reveal.

        An explicit cost wins over the listing type's price; unknown or
        missing types use the default cost.

        Raises:
            InvalidCostError: If the explicit cost is not positive
        """
        if cost is not None:
            validate_cost(cost)
            return cost
        if listing_type is not None:
            return self._costs.get(listing_type, self._default_cost)
        return self._default_cost

    def balance_view(self, user_id: str) -> BalanceView:
        """
        The user's balance view, created on first use.

        At most max_balance_views views are kept. Beyond that the least
        recently used views without subscribers are dropped, which also
        resets their low-credit cooldown.
        """
        view = self._views.get(user_id)
        if view is None:
            view = BalanceView(user_id, self._threshold, self._cooldown, clock=self._clock)
            self._views[user_id] = view
            self._evict_idle_views(keep=user_id)
        else:
            self._views.move_to_end(user_id)
        return view

    def _evict_idle_views(self, keep: str) -> None:
        excess = len(self._views) - self._max_views
        if excess <= 0:
            return
        idle = [
            user_id
            for user_id, view in self._views.items()
            if user_id != keep and not view.has_listeners
        ][:excess]
        for user_id in idle:
            del self._views[user_id]
        logger.debug(f"Dropped {len(idle)} idle balance view(s)")

    @property
    def balance_view_count(self) -> int:
        return len(self._views)

    async def reveal(
        self,
        user_id: str,
        listing_id: str,
        listing_type: Optional[ListingType] = None,
        cost: Optional[int] = None,
    ) -> RevealOutcome:
        """
        Reveal one listing for a user.

        Raises:
            InvalidCostError: If the cost is not positive
            AccountNotFoundError: If the user has no profile
            LedgerUnavailableError: If the ledger cannot be reached
        """
        price = self.resolve_cost(listing_type, cost)
        result = await self._ledger.charge_one(user_id, listing_id, price)

        if result.reason in (ChargeReason.CHARGED, ChargeReason.ALREADY_OWNED):
            self._cache.confirm(user_id, [listing_id])
        self.balance_view(user_id).update(result.balance)

        return RevealOutcome(
            listing_id=listing_id,
            status=status_for(result.reason),
            reason=result.reason,
            cost=result.cost,
            required=price,
            balance=result.balance,
        )

    async def reveal_many(
        self,
        user_id: str,
        listing_ids: list[str],
        listing_type: Optional[ListingType] = None,
        cost: Optional[int] = None,
    ) -> BulkRevealOutcome:
        """
        Reveal several listings at one price, all or nothing.

        Raises:
            EmptyRevealSelectionError: If listing_ids is empty
            InvalidCostError: If the cost is not positive
            AccountNotFoundError: If the user has no profile
            LedgerUnavailableError: If the ledger cannot be reached
        """
        price = self.resolve_cost(listing_type, cost)
        result = await self._ledger.charge_many(user_id, listing_ids, price)

        if result.succeeded:
            self._cache.confirm(user_id, [item.listing_id for item in result.items])
        self.balance_view(user_id).update(result.balance)

        return BulkRevealOutcome(
            status=status_for(result.reason),
            reason=result.reason,
            revealed=result.charged,
            already_owned=result.already_owned,
            total_cost=result.total_cost,
            items=result.items,
            balance=result.balance,
        )

    async def is_revealed(self, user_id: str, listing_id: str) -> bool:
        return await self._cache.contains(user_id, listing_id)

    async def revealed_listings(self, user_id: str) -> list[RevealRecord]:
        """Every reveal the user owns, newest first (always read from the ledger)."""
        return await self._ledger.list_revealed(user_id)

    async def current_balance(self, user_id: str) -> CreditBalance:
        """Read the balance from the ledger and publish it to the user's view."""
        balance = await self._ledger.get_balance(user_id)
        self.balance_view(user_id).update(balance)
        return balance

    def subscribe_balance(
        self,
        user_id: str,
        listener: Callable[[Optional[CreditBalance]], None],
    ) -> Unsubscribe:
        return self.balance_view(user_id).subscribe(listener)

    def subscribe_warnings(
        self,
        user_id: str,
        listener: Callable[[Optional[LowCreditWarning]], None],
    ) -> Unsubscribe:
        return self.balance_view(user_id).subscribe_warnings(listener)
