"""
Navigation module data models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from modules.profiles.models import ProfileState
from modules.session.models import SessionState
from shared.config import Settings, get_settings


class NavigationAction(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    LOADING = "loading"


class NavigationDecision(BaseModel):
    """What the presentation layer should do for one requested path."""

    action: NavigationAction
    target: Optional[str] = Field(None, description="Redirect target, only set for redirects")

    model_config = {"frozen": True}

    @classmethod
    def render(cls) -> "NavigationDecision":
        return cls(action=NavigationAction.RENDER)

    @classmethod
    def redirect(cls, path: str) -> "NavigationDecision":
        return cls(action=NavigationAction.REDIRECT, target=path)

    @classmethod
    def loading(cls) -> "NavigationDecision":
        return cls(action=NavigationAction.LOADING)

    @property
    def is_redirect(self) -> bool:
        return self.action == NavigationAction.REDIRECT


class GuardState(str, Enum):
    """The rule that produced a decision, in evaluation order."""

    LOADING_TIMED_OUT = "loading_timed_out"
    PROFILE_FETCH_ERROR = "profile_fetch_error"
    STILL_INITIALIZING = "still_initializing"
    PUBLIC_ACCESS = "public_access"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_NO_PROFILE = "authenticated_no_profile"
    ONBOARDING_REQUIRED = "onboarding_required"
    ONBOARDING_ALREADY_DONE = "onboarding_already_done"
    ALREADY_SIGNED_IN = "already_signed_in"
    DEFAULT = "default"


class NavigationResolution(BaseModel):
    """Resolver output: the decision plus the rule that produced it."""

    decision: NavigationDecision
    state: GuardState
    remember_destination: Optional[str] = Field(
        None,
        description="Protected path to restore after sign-in",
    )

    model_config = {"frozen": True}


@dataclass(frozen=True)
class NavigationSnapshot:
    """
    Everything the resolver looks at besides the path.

    loading_elapsed is the number of seconds the session or profile has
    been continuously loading (0 when nothing is loading).
    """

    session: SessionState
    profile: ProfileState
    loading_elapsed: float = 0.0


def normalize_path(path: str) -> str:
    """Drop query string, fragment and trailing slash."""
    path = path.split("#", 1)[0].split("?", 1)[0].strip() or "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def matches_route(path: str, route: str) -> bool:
    """
    Whether `path` is `route` or lies beneath it.

    Matching is per path segment, so /dashboards does not match
    /dashboard. The root route only matches itself.
    """
    if route == "/":
        return path == "/"
    return path == route or path.startswith(route.rstrip("/") + "/")


class NavigationPolicy(BaseModel):
    """Paths and timeout the resolver works with."""

    loading_timeout_seconds: float = Field(10.0, gt=0)
    login_path: str = "/login"
    recovery_path: str = "/post-auth"
    onboarding_path: str = "/onboarding"
    welcome_path: str = "/welcome"
    default_authenticated_path: str = "/dashboard"
    protected_routes: tuple[str, ...] = ("/dashboard", "/onboarding", "/welcome", "/post-auth")
    public_routes: tuple[str, ...] = (
        "/",
        "/login",
        "/signup",
        "/auth/callback",
        "/about",
        "/contact",
        "/pricing",
        "/faq",
        "/terms",
        "/privacy",
        "/how-it-works",
    )
    auth_entry_routes: tuple[str, ...] = ("/login", "/signup")
    unrecorded_routes: tuple[str, ...] = ("/login", "/signup", "/auth/callback")

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NavigationPolicy":
        settings = settings or get_settings()
        return cls(
            loading_timeout_seconds=settings.loading_timeout_seconds,
            login_path=settings.login_path,
            recovery_path=settings.recovery_path,
            onboarding_path=settings.onboarding_path,
            welcome_path=settings.welcome_path,
            default_authenticated_path=settings.default_authenticated_path,
            protected_routes=tuple(settings.protected_routes),
            public_routes=tuple(settings.public_routes),
            auth_entry_routes=tuple(settings.auth_entry_routes),
            unrecorded_routes=tuple(settings.unrecorded_routes),
        )

    def is_protected(self, path: str) -> bool:
        return any(matches_route(path, route) for route in self.protected_routes)

    def is_public(self, path: str) -> bool:
        return any(matches_route(path, route) for route in self.public_routes)

    def is_auth_entry(self, path: str) -> bool:
        return any(matches_route(path, route) for route in self.auth_entry_routes)

    def is_onboarding_flow(self, path: str) -> bool:
        return matches_route(path, self.onboarding_path) or matches_route(path, self.welcome_path)
