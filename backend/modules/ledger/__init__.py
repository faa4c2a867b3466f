"""
Credit ledger module.

The single authority for credit balances: reads, atomic charges for
reveals (single and bulk) and grants.

Public API:
- ICreditLedger: Interface for ledger operations
- CreditLedger: In-memory implementation with per-user locks
- SupabaseCreditLedger: Postgres-function-backed implementation
- Models: CreditBalance, RevealRecord, ChargeReason, ChargeResult, ...
- Ledger exceptions: InsufficientCreditsError, LedgerUnavailableError, etc.
"""

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
from .exceptions import (
    LedgerError,
    InsufficientCreditsError,
    InvalidCostError,
    InvalidListingIdError,
    EmptyRevealSelectionError,
    AccountNotFoundError,
    LedgerUnavailableError,
)
from .service import CreditLedger
from .supabase import SupabaseCreditLedger

__all__ = [
    # Interface
    "ICreditLedger",
    # Implementations
    "CreditLedger",
    "SupabaseCreditLedger",
    # Models
    "BulkChargeItem",
    "BulkChargeResult",
    "ChargeReason",
    "ChargeResult",
    "CreditBalance",
    "GrantResult",
    "RevealRecord",
    # Exceptions
    "LedgerError",
    "InsufficientCreditsError",
    "InvalidCostError",
    "InvalidListingIdError",
    "EmptyRevealSelectionError",
    "AccountNotFoundError",
    "LedgerUnavailableError",
]
