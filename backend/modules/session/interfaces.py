"""
Session module interface.

The identity provider (Supabase Auth in production) is an external
collaborator. SessionStore only depends on this protocol.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from .models import AuthEvent, Session

AuthStateCallback = Callable[[AuthEvent, Optional[Session]], None]


@runtime_checkable
class IIdentityProvider(Protocol):
    """Interface for the identity provider backing a SessionStore."""

    async def get_session(self) -> Optional[Session]:
        """
        Read the current session.

        Returns:
            The Session, or None when nobody is signed in
        """
        ...

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        """
        Subscribe to sign-in, sign-out and token-refresh events.

        Args:
            callback: Called with the event and the session after it

        Returns:
            A callable that cancels the subscription
        """
        ...

    async def sign_out(self) -> None:
        """End the current session."""
        ...
