"""
Identity-provider adapters.

- SupabaseIdentityProvider: wraps a supabase client's auth namespace.
- StaticIdentityProvider: a fixed session. The navigation route uses it
  to serve the bearer token the auth middleware validated.
"""

import logging
from typing import Any, Callable, Optional

from .interfaces import AuthStateCallback
from .models import AuthEvent, Session

logger = logging.getLogger(__name__)


def session_from_supabase(raw: Any) -> Optional[Session]:
    """Map a gotrue Session object onto our Session model."""
    if raw is None or getattr(raw, "user", None) is None:
        return None
    return Session(
        user_id=raw.user.id,
        email=getattr(raw.user, "email", None),
        access_token=getattr(raw, "access_token", None),
    )


class SupabaseIdentityProvider:
    """Identity provider backed by supabase-py's auth client."""

    def __init__(self, client: Any):
        self._auth = client.auth

    async def get_session(self) -> Optional[Session]:
        return session_from_supabase(self._auth.get_session())

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        def handle(event: str, raw_session: Any) -> None:
            try:
                auth_event = AuthEvent(event)
            except ValueError:
                logger.debug(f"Ignoring auth event {event}")
                return
            callback(auth_event, session_from_supabase(raw_session))

        subscription = self._auth.on_auth_state_change(handle)
        return subscription.unsubscribe

    async def sign_out(self) -> None:
        self._auth.sign_out()


class StaticIdentityProvider:
    """
    Identity provider holding one fixed session.

    Emits SIGNED_OUT to its subscribers when sign_out() is called.
    """

    def __init__(self, session: Optional[Session]):
        self._session = session
        self._callbacks: list[AuthStateCallback] = []

    async def get_session(self) -> Optional[Session]:
        return self._session

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def sign_out(self) -> None:
        self._session = None
        for callback in list(self._callbacks):
            callback(AuthEvent.SIGNED_OUT, None)
