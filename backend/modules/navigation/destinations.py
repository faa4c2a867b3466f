"""
Intended-destination memory.

Remembers the protected path an anonymous visitor asked for so the
sign-in flow can send them there afterwards. One slot; each write
replaces the previous one.
"""

import logging
from typing import Iterable, Optional

from .models import matches_route, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_UNRECORDED_ROUTES = ("/login", "/signup", "/auth/callback")


class IntendedDestinationStore:
    """Single-slot store for the post-sign-in destination."""

    def __init__(self, unrecorded_routes: Iterable[str] = DEFAULT_UNRECORDED_ROUTES):
        self._unrecorded = tuple(unrecorded_routes)
        self._destination: Optional[str] = None

    def remember(self, path: Optional[str]) -> bool:
        """
        Store `path` unless it is empty or part of the sign-in flow.

        Returns:
            True if the path was stored
        """
        if not path:
            return False
        normalized = normalize_path(path)
        if any(matches_route(normalized, route) for route in self._unrecorded):
            return False
        self._destination = path
        logger.debug(f"Stored intended destination {path}")
        return True

    def peek(self) -> Optional[str]:
        return self._destination

    def pop(self) -> Optional[str]:
        """Return the stored destination and clear the slot."""
        destination, self._destination = self._destination, None
        return destination
