"""
Session module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AuthEvent(str, Enum):
    """Identity-provider events the session store reacts to."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


class Session(BaseModel):
    """
    One authenticated identity for the lifetime of a browser tab.

    A Session only exists for an authenticated user, so a non-empty
    user_id is enforced at construction.
    """

    user_id: str = Field(..., min_length=1, description="Opaque stable user identifier")
    email: Optional[str] = Field(None, description="Email on the identity, if any")
    access_token: Optional[str] = Field(None, description="Current access token", repr=False)

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return True


class SessionState(BaseModel):
    """
    Snapshot of the session store.

    `initialized` distinguishes "not yet determined" from "determined
    absent": it flips from False to True exactly once per store.
    """

    session: Optional[Session] = None
    initialized: bool = False
    loading: bool = True
    last_event: Optional[AuthEvent] = None

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id if self.session else None

    @property
    def is_settled(self) -> bool:
        """Initialized and not loading."""
        return self.initialized and not self.loading
