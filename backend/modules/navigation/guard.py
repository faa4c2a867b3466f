"""
Navigation guard.

Stateful wrapper around the pure resolver. It follows the session and
profile stores, measures how long loading has lasted, and re-publishes
the decision for the current path on every change, including when the
loading timeout elapses.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from modules.profiles.store import ProfileStore
from modules.session.store import SessionStore
from shared.observable import Observable, Unsubscribe

from .destinations import IntendedDestinationStore
from .models import NavigationDecision, NavigationPolicy, NavigationSnapshot
from .resolver import is_loading, resolve_navigation

logger = logging.getLogger(__name__)


class NavigationGuard:
    """
    Route guard for one client.

    Call resolve_navigation() on every navigation. The latest decision is
    also available as an observable, recomputed synchronously whenever
    the session or profile changes.
    """

    def __init__(
        self,
        session_store: SessionStore,
        profile_store: ProfileStore,
        policy: Optional[NavigationPolicy] = None,
        destinations: Optional[IntendedDestinationStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session_store = session_store
        self._profile_store = profile_store
        self._policy = policy or NavigationPolicy.from_settings()
        if destinations is None:
            destinations = IntendedDestinationStore(self._policy.unrecorded_routes)
        self._destinations = destinations
        self._clock = clock

        self._path: Optional[str] = None
        self._loading_since: Optional[float] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._timer_fired = False
        self._decision: Observable[NavigationDecision] = Observable(NavigationDecision.loading())

        self._unsubscribers: list[Unsubscribe] = [
            session_store.subscribe(lambda _: self._on_change()),
            profile_store.subscribe(lambda _: self._on_change()),
        ]
        self._sync_loading()

    @property
    def policy(self) -> NavigationPolicy:
        return self._policy

    @property
    def destinations(self) -> IntendedDestinationStore:
        return self._destinations

    @property
    def decision(self) -> NavigationDecision:
        return self._decision.value

    def subscribe(self, listener: Callable[[NavigationDecision], None]) -> Unsubscribe:
        return self._decision.subscribe(listener)

    def snapshot(self) -> NavigationSnapshot:
        elapsed = 0.0
        if self._loading_since is not None:
            elapsed = self._clock() - self._loading_since
            if self._timer_fired:
                elapsed = max(elapsed, self._policy.loading_timeout_seconds)
        return NavigationSnapshot(
            session=self._session_store.state,
            profile=self._profile_store.state,
            loading_elapsed=elapsed,
        )

    def resolve_navigation(self, path: str) -> NavigationDecision:
        """Evaluate `path` against the latest state and make it the current path."""
        self._path = path
        return self._evaluate()

    def _evaluate(self) -> NavigationDecision:
        resolution = resolve_navigation(self.snapshot(), self._path, self._policy)
        if resolution.remember_destination:
            self._destinations.remember(resolution.remember_destination)

        if resolution.decision != self._decision.value:
            logger.debug(
                f"Navigation {self._path}: {resolution.state.value} -> "
                f"{resolution.decision.action.value} {resolution.decision.target or ''}"
            )
            self._decision.set(resolution.decision)
        return resolution.decision

    def _on_change(self) -> None:
        self._sync_loading()
        if self._path is not None:
            self._evaluate()

    def _sync_loading(self) -> None:
        loading = is_loading(
            NavigationSnapshot(session=self._session_store.state, profile=self._profile_store.state)
        )
        if loading and self._loading_since is None:
            self._loading_since = self._clock()
            self._start_timer()
        elif not loading and self._loading_since is not None:
            self._loading_since = None
            self._cancel_timer()

    def _start_timer(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Without a loop the timeout is only observed on the next evaluation
            return
        self._timer = loop.call_later(self._policy.loading_timeout_seconds, self._on_timeout)

    def _cancel_timer(self) -> None:
        self._timer_fired = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timeout(self) -> None:
        self._timer = None
        self._timer_fired = True
        logger.warning(f"Loading exceeded {self._policy.loading_timeout_seconds}s")
        if self._path is not None:
            self._evaluate()

    def close(self) -> None:
        """Detach from both stores and cancel the loading timer."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._cancel_timer()
