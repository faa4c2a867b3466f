"""
Balance view.

Holds the last known balance of one user as an observable and raises a
low-credit warning when a limited balance falls to the threshold.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from modules.ledger.models import CreditBalance
from shared.observable import Observable, Unsubscribe

from .models import LowCreditWarning

logger = logging.getLogger(__name__)

DEFAULT_LOW_CREDIT_THRESHOLD = 50
DEFAULT_COOLDOWN_SECONDS = 3600.0


class BalanceView:
    """
    Observable balance for one user.

    A warning fires when a limited balance is in (0, threshold], at most
    once per cooldown window. The warning re-arms once the balance climbs
    back above the threshold.
    """

    def __init__(
        self,
        user_id: str,
        threshold: int = DEFAULT_LOW_CREDIT_THRESHOLD,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.user_id = user_id
        self._threshold = threshold
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._balance: Observable[Optional[CreditBalance]] = Observable(None)
        self._warnings: Observable[Optional[LowCreditWarning]] = Observable(None)
        self._notified = False
        self._last_warned_at: Optional[float] = None

    @property
    def balance(self) -> Optional[CreditBalance]:
        return self._balance.value

    @property
    def has_listeners(self) -> bool:
        return self._balance.listener_count > 0 or self._warnings.listener_count > 0

    def subscribe(self, listener: Callable[[Optional[CreditBalance]], None]) -> Unsubscribe:
        return self._balance.subscribe(listener)

    def subscribe_warnings(self, listener: Callable[[Optional[LowCreditWarning]], None]) -> Unsubscribe:
        return self._warnings.subscribe(listener)

    def update(self, balance: CreditBalance) -> Optional[LowCreditWarning]:
        """
        Publish a fresh balance.

        Returns:
            The warning raised by this update, if any
        """
        if balance != self._balance.value:
            self._balance.set(balance)
        return self._check_low_credit(balance)

    def _check_low_credit(self, balance: CreditBalance) -> Optional[LowCreditWarning]:
        if balance.unlimited:
            return None

        credits = balance.credits_remaining
        if credits > self._threshold:
            self._notified = False
            return None
        if credits <= 0 or self._notified:
            return None

        now = self._clock()
        if self._last_warned_at is not None and now - self._last_warned_at <= self._cooldown:
            return None

        self._notified = True
        self._last_warned_at = now
        warning = LowCreditWarning(
            user_id=self.user_id,
            credits_remaining=credits,
            threshold=self._threshold,
            created_at=datetime.now(timezone.utc),
        )
        logger.info(f"Low credit warning for {self.user_id}: {credits} left")
        self._warnings.set(warning)
        return warning
