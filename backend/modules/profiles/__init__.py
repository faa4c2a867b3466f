"""
Profiles module.

Owns the per-user entitlement and business-identity record.

Public API:
- IProfileRepository: Interface for profile access
- ProfileRepository / InMemoryProfileRepository: Implementations
- ProfileStore: Observable ProfileState following the session
- ProfileState variants: ProfileLoading, ProfileNotFound, ProfileReady, ProfileFetchError
- Profile exceptions: ProfileNotFoundError, ProfileFetchFailedError, ProtectedFieldError
"""

from .interfaces import IProfileRepository
from .models import (
    LEDGER_OWNED_FIELDS,
    Profile,
    ProfileUpdate,
    SubscriptionStatus,
    ProfileState,
    ProfileLoading,
    ProfileNotFound,
    ProfileReady,
    ProfileFetchError,
)
from .repository import ProfileRepository, InMemoryProfileRepository, map_profile_row
from .store import ProfileStore
from .exceptions import ProfileNotFoundError, ProfileFetchFailedError, ProtectedFieldError

__all__ = [
    # Interface
    "IProfileRepository",
    # Models
    "LEDGER_OWNED_FIELDS",
    "Profile",
    "ProfileUpdate",
    "SubscriptionStatus",
    "ProfileState",
    "ProfileLoading",
    "ProfileNotFound",
    "ProfileReady",
    "ProfileFetchError",
    # Implementations
    "ProfileRepository",
    "InMemoryProfileRepository",
    "map_profile_row",
    "ProfileStore",
    # Exceptions
    "ProfileNotFoundError",
    "ProfileFetchFailedError",
    "ProtectedFieldError",
]
