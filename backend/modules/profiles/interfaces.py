"""
Profiles module interface.

The ProfileStore and the API depend on IProfileRepository, not on the
Supabase-backed implementation.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import Profile


@runtime_checkable
class IProfileRepository(Protocol):
    """Interface for profile row access."""

    async def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        """
        Load a user's profile.

        Args:
            user_id: Supabase user ID (UUID)

        Returns:
            The Profile, or None when no row exists yet

        Raises:
            ProfileFetchFailedError: If the store could not be read
        """
        ...

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> Profile:
        """
        Update descriptive profile fields (last writer wins).

        Raises:
            ProtectedFieldError: If fields include credits_remaining or unlimited
            ProfileNotFoundError: If the profile doesn't exist
        """
        ...

    async def complete_onboarding(self, user_id: str) -> Profile:
        """
        Mark onboarding as complete.

        Raises:
            ProfileNotFoundError: If the profile doesn't exist
        """
        ...
