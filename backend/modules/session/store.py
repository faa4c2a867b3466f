"""
Session store.

Holds the current authentication identity and notifies subscribers on
every change. One store per browser tab / client; construct it at start
and inject it into the ProfileStore and NavigationGuard.
"""

import logging
from typing import Callable, Optional

from shared.observable import Observable, Unsubscribe

from .interfaces import IIdentityProvider
from .models import AuthEvent, Session, SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Observable session state fed by an identity provider.

    The store starts uninitialized and loading. initialize() reads the
    provider's current session and flips `initialized` to True; events
    from the provider keep it current afterwards.
    """

    def __init__(self, provider: IIdentityProvider):
        self._provider = provider
        self._state: Observable[SessionState] = Observable(SessionState())
        self._unsubscribe_provider: Optional[Callable[[], None]] = None

    @property
    def state(self) -> SessionState:
        return self._state.value

    @property
    def session(self) -> Optional[Session]:
        return self._state.value.session

    def subscribe(self, listener: Callable[[SessionState], None]) -> Unsubscribe:
        return self._state.subscribe(listener)

    async def initialize(self) -> SessionState:
        """
        Resolve the initial session and start listening for auth events.

        Calling this again after initialization is a no-op.
        """
        if self._unsubscribe_provider is not None:
            return self.state

        self._unsubscribe_provider = self._provider.on_auth_state_change(self._handle_event)
        if self.state.initialized:
            # An event arrived while we were subscribing
            return self.state

        session = await self._provider.get_session()
        if not self.state.initialized:
            self._set(session, AuthEvent.INITIAL_SESSION)
        return self.state

    def _handle_event(self, event: AuthEvent, session: Optional[Session]) -> None:
        logger.debug(f"Auth event {event.value} (user={session.user_id if session else None})")
        if event == AuthEvent.SIGNED_OUT:
            session = None
        self._set(session, event)

    def _set(self, session: Optional[Session], event: AuthEvent) -> None:
        self._state.set(
            SessionState(session=session, initialized=True, loading=False, last_event=event)
        )

    async def sign_out(self) -> None:
        """Sign out through the provider and clear the session."""
        await self._provider.sign_out()
        if self.session is not None:
            self._set(None, AuthEvent.SIGNED_OUT)

    def close(self) -> None:
        """Stop listening to the identity provider."""
        if self._unsubscribe_provider is not None:
            self._unsubscribe_provider()
            self._unsubscribe_provider = None
