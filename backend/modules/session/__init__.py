"""
Session module.

Tracks the current authentication identity as an observable store fed by
an identity provider.

Public API:
- IIdentityProvider: Interface for the identity provider
- SessionStore: Observable session state
- Session / SessionState / AuthEvent: Models
- SupabaseIdentityProvider / StaticIdentityProvider: Provider adapters
"""

from .interfaces import IIdentityProvider, AuthStateCallback
from .models import AuthEvent, Session, SessionState
from .provider import SupabaseIdentityProvider, StaticIdentityProvider, session_from_supabase
from .store import SessionStore

__all__ = [
    # Interface
    "IIdentityProvider",
    "AuthStateCallback",
    # Models
    "AuthEvent",
    "Session",
    "SessionState",
    # Implementations
    "SessionStore",
    "SupabaseIdentityProvider",
    "StaticIdentityProvider",
    "session_from_supabase",
]
