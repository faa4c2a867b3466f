"""
Navigation API endpoints.

Lets a client ask the server where a path should lead for the caller's
current session and profile.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from api.dependencies import get_navigation_policy, get_profile_repository
from api.middleware.auth import get_optional_user
from modules.profiles.exceptions import ProfileFetchFailedError
from modules.profiles.interfaces import IProfileRepository
from modules.profiles.models import ProfileFetchError, ProfileNotFound, ProfileReady, ProfileState
from modules.session.models import Session
from modules.session.provider import StaticIdentityProvider
from modules.session.store import SessionStore
from shared.models import AuthenticatedUser

from .models import GuardState, NavigationAction, NavigationPolicy, NavigationSnapshot
from .resolver import resolve_navigation

router = APIRouter()


class NavigationResponse(BaseModel):
    """Resolved navigation for one path."""

    path: str
    action: NavigationAction
    target: Optional[str] = None
    state: GuardState
    remember_destination: Optional[str] = None


async def load_snapshot(
    user: Optional[AuthenticatedUser],
    profiles: IProfileRepository,
) -> NavigationSnapshot:
    """
    Build a settled snapshot for a request.

    The caller's identity is the bearer token the auth middleware already
    validated, served to a SessionStore through a StaticIdentityProvider.
    """
    session = None
    if user is not None:
        session = Session(user_id=user.id, email=user.email, access_token=user.access_token)
    session_store = SessionStore(StaticIdentityProvider(session))
    session_state = await session_store.initialize()
    session_store.close()

    if user is None:
        return NavigationSnapshot(session=session_state, profile=ProfileNotFound())

    profile_state: ProfileState
    try:
        profile = await profiles.get_by_user_id(user.id)
    except ProfileFetchFailedError as e:
        profile_state = ProfileFetchError(message=e.message, user_id=user.id)
    else:
        profile_state = ProfileReady(profile) if profile else ProfileNotFound(user_id=user.id)

    return NavigationSnapshot(
        session=session_state,
        profile=profile_state,
    )


@router.get("/resolve", response_model=NavigationResponse)
async def resolve(
    path: str = Query(..., min_length=1, description="Requested client path"),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    profiles: IProfileRepository = Depends(get_profile_repository),
    policy: NavigationPolicy = Depends(get_navigation_policy),
) -> NavigationResponse:
    """
    Resolve a client path to render / redirect.

    Works with or without authentication. The server always has a settled
    view, so the answer is never "loading".
    """
    snapshot = await load_snapshot(user, profiles)
    resolution = resolve_navigation(snapshot, path, policy)
    return NavigationResponse(
        path=path,
        action=resolution.decision.action,
        target=resolution.decision.target,
        state=resolution.state,
        remember_destination=resolution.remember_destination,
    )
