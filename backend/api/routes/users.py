"""
User-related endpoints.

Provides endpoints for the current user's profile and onboarding.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from modules.ledger.models import CreditBalance
from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.interfaces import IProfileRepository
from modules.profiles.models import Profile, ProfileUpdate
from modules.reveals.service import RevealService
from shared.exceptions import LeadvaultError
from shared.models import AuthenticatedUser

from ..dependencies import get_profile_repository, get_reveal_service
from ..middleware.auth import get_current_user
from ..models.errors import ERROR_RESPONSES, http_error

router = APIRouter()


class UserProfileResponse(BaseModel):
    """Current user with profile and balance."""

    id: str
    email: Optional[str] = None
    email_verified: bool
    role: str
    profile: Profile
    balance: CreditBalance


async def _load_profile(user_id: str, profiles: IProfileRepository) -> Profile:
    profile = await profiles.get_by_user_id(user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


@router.get("/me", response_model=UserProfileResponse, responses=ERROR_RESPONSES)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: IProfileRepository = Depends(get_profile_repository),
    reveals: RevealService = Depends(get_reveal_service),
) -> UserProfileResponse:
    """
    Get the current user's profile and credit balance.

    Returns 404 while the profile has not been provisioned yet.
    """
    try:
        profile = await _load_profile(user.id, profiles)
        balance = await reveals.current_balance(user.id)
    except LeadvaultError as e:
        raise http_error(e)

    return UserProfileResponse(
        id=user.id,
        email=user.email,
        email_verified=user.email_verified,
        role=user.role,
        profile=profile,
        balance=balance,
    )


@router.patch("/me", response_model=Profile, responses=ERROR_RESPONSES)
async def update_current_user_profile(
    update: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: IProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """
    Update descriptive profile fields.

    Credit fields cannot be changed here.
    """
    try:
        return await profiles.update_fields(user.id, update.model_dump(exclude_unset=True))
    except LeadvaultError as e:
        raise http_error(e)


@router.post("/me/onboarding", response_model=Profile, responses=ERROR_RESPONSES)
async def complete_onboarding(
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: IProfileRepository = Depends(get_profile_repository),
) -> Profile:
    """
    Mark the current user's onboarding as complete.
    """
    try:
        return await profiles.complete_onboarding(user.id)
    except LeadvaultError as e:
        raise http_error(e)
