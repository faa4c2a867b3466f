"""
Navigation module.

Decides, for every navigation, whether to render the requested screen,
redirect, or keep showing a loading state.

Public API:
- resolve_navigation: Pure resolver
- NavigationGuard: Store-following wrapper with the loading timeout
- IntendedDestinationStore: Post-sign-in destination memory
- NavigationPolicy / NavigationDecision / GuardState: Models
"""

from .models import (
    GuardState,
    NavigationAction,
    NavigationDecision,
    NavigationPolicy,
    NavigationResolution,
    NavigationSnapshot,
    matches_route,
    normalize_path,
)
from .resolver import is_loading, resolve_navigation
from .destinations import IntendedDestinationStore
from .guard import NavigationGuard

__all__ = [
    # Models
    "GuardState",
    "NavigationAction",
    "NavigationDecision",
    "NavigationPolicy",
    "NavigationResolution",
    "NavigationSnapshot",
    "matches_route",
    "normalize_path",
    # Resolver
    "is_loading",
    "resolve_navigation",
    # Stateful pieces
    "IntendedDestinationStore",
    "NavigationGuard",
]
