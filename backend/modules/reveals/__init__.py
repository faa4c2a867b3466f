"""
Reveals module.

Turns credit charges into permanent access to a listing's gated fields.

Public API:
- RevealService: reveal / reveal_many / balance observables
- RevealedListingsCache / BalanceView: Read-through views
- Models: ListingType, REVEAL_COSTS, RevealStatus, RevealOutcome, BulkRevealOutcome, LowCreditWarning
"""

from .models import (
    ListingType,
    REVEAL_COSTS,
    RevealStatus,
    RevealOutcome,
    BulkRevealOutcome,
    LowCreditWarning,
    RevealRequest,
    BulkRevealRequest,
)
from .cache import RevealedListingsCache
from .balance import BalanceView
from .service import RevealService

__all__ = [
    # Service
    "RevealService",
    # Views
    "RevealedListingsCache",
    "BalanceView",
    # Models
    "ListingType",
    "REVEAL_COSTS",
    "RevealStatus",
    "RevealOutcome",
    "BulkRevealOutcome",
    "LowCreditWarning",
    "RevealRequest",
    "BulkRevealRequest",
]
