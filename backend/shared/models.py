"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from JWT claims and made available
    to route handlers via dependency injection. The raw access token
    is kept so that route handlers can build a server-side Session.
    """

    id: str = Field(..., min_length=1, description="User ID (UUID from Supabase)")
    email: Optional[EmailStr] = Field(None, description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")
    role: str = Field(default="user", description="User role")
    access_token: Optional[str] = Field(None, description="Bearer token the user presented", repr=False)

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }
