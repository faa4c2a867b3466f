"""
Profile store.

Follows the SessionStore: whenever the signed-in user changes, the store
goes to ProfileLoading and fetches the profile for the new user. A fetch
started for a user who is no longer current never overwrites newer state.
"""

import asyncio
import logging
from typing import Callable, Optional

from modules.session import AuthEvent, SessionState, SessionStore
from shared.observable import Observable, Unsubscribe

from .interfaces import IProfileRepository
from .models import (
    Profile,
    ProfileFetchError,
    ProfileLoading,
    ProfileNotFound,
    ProfileReady,
    ProfileState,
)

logger = logging.getLogger(__name__)

# Events after which the profile row may have changed for the same user
REFETCH_EVENTS = frozenset({AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED, AuthEvent.USER_UPDATED})


class ProfileStore:
    """
    Observable ProfileState for the current session's user.

    refresh() may be called any number of times: concurrent calls for the
    same user share one fetch, and results belonging to a superseded
    user or generation are dropped.
    """

    def __init__(self, repository: IProfileRepository, session_store: SessionStore):
        self._repository = repository
        self._session_store = session_store
        self._state: Observable[ProfileState] = Observable(ProfileLoading())
        self._user_id: Optional[str] = None
        self._generation = 0
        self._inflight: Optional[asyncio.Task] = None
        self._inflight_generation = -1
        self._background: set[asyncio.Task] = set()

        self._unsubscribe_session = session_store.subscribe(self._on_session)
        if session_store.state.initialized:
            self._on_session(session_store.state)

    @property
    def state(self) -> ProfileState:
        return self._state.value

    @property
    def profile(self) -> Optional[Profile]:
        state = self._state.value
        return state.profile if isinstance(state, ProfileReady) else None

    def subscribe(self, listener: Callable[[ProfileState], None]) -> Unsubscribe:
        return self._state.subscribe(listener)

    def _on_session(self, session_state: SessionState) -> None:
        if not session_state.initialized:
            return

        user_id = session_state.user_id
        if user_id is None:
            self._user_id = None
            self._generation += 1
            self._state.set(ProfileNotFound())
            return

        if user_id != self._user_id:
            self._user_id = user_id
            self._generation += 1
            self._state.set(ProfileLoading(user_id=user_id))
            self._schedule_refresh()
        elif session_state.last_event in REFETCH_EVENTS:
            self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: the first awaited refresh() performs the fetch
            return
        task = loop.create_task(self.refresh())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def refresh(self) -> ProfileState:
        """
        Fetch the profile for the current session's user.

        Returns:
            The state after this fetch, or the current state if the fetch
            was superseded while in flight
        """
        user_id = self._session_store.state.user_id
        if user_id is None:
            if self._session_store.state.initialized and not isinstance(self.state, ProfileNotFound):
                self._generation += 1
                self._state.set(ProfileNotFound())
            return self.state

        inflight = self._inflight
        if (
            inflight is not None
            and not inflight.done()
            and self._inflight_generation == self._generation
            and self._user_id == user_id
        ):
            return await asyncio.shield(inflight)

        self._user_id = user_id
        self._generation += 1
        generation = self._generation

        current = self.state
        # Keep showing a ready profile for the same user while it re-fetches
        if not (isinstance(current, ProfileReady) and current.user_id == user_id):
            if not (isinstance(current, ProfileLoading) and current.user_id == user_id):
                self._state.set(ProfileLoading(user_id=user_id))

        task = asyncio.ensure_future(self._fetch(user_id, generation))
        self._inflight = task
        self._inflight_generation = generation
        return await asyncio.shield(task)

    async def _fetch(self, user_id: str, generation: int) -> ProfileState:
        state: ProfileState
        try:
            profile = await self._repository.get_by_user_id(user_id)
        except Exception as e:
            logger.warning(f"Profile fetch failed for {user_id}: {e}", exc_info=True)
            state = ProfileFetchError(message=str(e), user_id=user_id)
        else:
            state = ProfileReady(profile) if profile is not None else ProfileNotFound(user_id=user_id)

        if generation != self._generation:
            logger.debug(f"Discarding superseded profile fetch for {user_id}")
            return self.state

        self._state.set(state)
        return state

    def close(self) -> None:
        """Stop following the session store and drop in-flight results."""
        self._unsubscribe_session()
        self._generation += 1
        for task in list(self._background):
            task.cancel()
