"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The ledger backend is chosen by settings.ledger_backend: "supabase"
talks to Postgres through the charge_reveals / grant_credits functions,
"memory" keeps profiles and reveals in process (local development).
"""

from typing import TYPE_CHECKING

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.ledger.interfaces import ICreditLedger
    from modules.navigation.models import NavigationPolicy
    from modules.profiles.interfaces import IProfileRepository
    from modules.reveals.service import RevealService


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._profile_repository: "IProfileRepository | None" = None
        self._ledger: "ICreditLedger | None" = None
        self._reveal_service: "RevealService | None" = None
        self._navigation_policy: "NavigationPolicy | None" = None

    @property
    def uses_memory_backend(self) -> bool:
        return get_settings().ledger_backend == "memory"

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService()
        return self._auth_service

    @property
    def profiles(self) -> "IProfileRepository":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            if self.uses_memory_backend:
                from modules.profiles.repository import InMemoryProfileRepository
                self._profile_repository = InMemoryProfileRepository()
            else:
                from modules.profiles.repository import ProfileRepository
                from shared.database import get_supabase_client
                self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def ledger(self) -> "ICreditLedger":
        """Get the credit ledger instance."""
        if self._ledger is None:
            if self.uses_memory_backend:
                from modules.ledger.service import CreditLedger
                self._ledger = CreditLedger(self.profiles)
            else:
                from modules.ledger.supabase import SupabaseCreditLedger
                from shared.database import get_supabase_client
                self._ledger = SupabaseCreditLedger(get_supabase_client())
        return self._ledger

    @property
    def reveals(self) -> "RevealService":
        """Get the reveal service instance."""
        if self._reveal_service is None:
            from modules.reveals.service import RevealService
            settings = get_settings()
            self._reveal_service = RevealService(
                ledger=self.ledger,
                default_cost=settings.default_reveal_cost,
                low_credit_threshold=settings.low_credit_threshold,
                low_credit_cooldown=settings.low_credit_cooldown_seconds,
            )
        return self._reveal_service

    @property
    def navigation_policy(self) -> "NavigationPolicy":
        """Get the navigation policy built from settings."""
        if self._navigation_policy is None:
            from modules.navigation.models import NavigationPolicy
            self._navigation_policy = NavigationPolicy.from_settings()
        return self._navigation_policy

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._profile_repository = None
        self._ledger = None
        self._reveal_service = None
        self._navigation_policy = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_profile_repository() -> "IProfileRepository":
    """FastAPI dependency for the profile repository."""
    return get_container().profiles


def get_credit_ledger() -> "ICreditLedger":
    """FastAPI dependency for the credit ledger."""
    return get_container().ledger


def get_reveal_service() -> "RevealService":
    """FastAPI dependency for reveal service."""
    return get_container().reveals


def get_navigation_policy() -> "NavigationPolicy":
    """FastAPI dependency for the navigation policy."""
    return get_container().navigation_policy
