"""
Navigation resolver.

A pure function from (session, profile, loading time, path) to a
NavigationDecision. Rules are checked in order and the first match wins:

1. loading_timed_out       session present, still loading past the timeout
2. profile_fetch_error     session present, profile fetch failed
3. still_initializing      session unknown, or session/profile loading
4. public_access /         no session: public paths render, everything else
   unauthenticated         goes to login (protected paths are remembered)
5. authenticated_no_profile  session present, no profile row yet
6. onboarding_required     onboarding incomplete, outside the onboarding flow
7. onboarding_already_done onboarding complete, inside the onboarding flow
8. already_signed_in       onboarded user on a login/signup page
9. default                 render

A redirect that points at the requested path itself is turned into
render, so following the decisions can never loop.
"""

from .models import (
    GuardState,
    NavigationDecision,
    NavigationPolicy,
    NavigationResolution,
    NavigationSnapshot,
    matches_route,
    normalize_path,
)
from modules.profiles.models import ProfileFetchError, ProfileLoading, ProfileReady


def is_loading(snapshot: NavigationSnapshot) -> bool:
    """Whether the snapshot is still waiting on the session or the profile."""
    session = snapshot.session
    if not session.initialized or session.loading:
        return True
    return session.is_authenticated and isinstance(snapshot.profile, ProfileLoading)


def _evaluate(snapshot: NavigationSnapshot, path: str, policy: NavigationPolicy) -> NavigationResolution:
    session = snapshot.session
    profile_state = snapshot.profile
    has_session = session.initialized and session.is_authenticated
    loading = is_loading(snapshot)

    if has_session and loading and snapshot.loading_elapsed >= policy.loading_timeout_seconds:
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.recovery_path),
            state=GuardState.LOADING_TIMED_OUT,
        )

    if has_session and isinstance(profile_state, ProfileFetchError):
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.recovery_path),
            state=GuardState.PROFILE_FETCH_ERROR,
        )

    if loading:
        return NavigationResolution(
            decision=NavigationDecision.loading(),
            state=GuardState.STILL_INITIALIZING,
        )

    if not has_session:
        if policy.is_public(path):
            return NavigationResolution(
                decision=NavigationDecision.render(),
                state=GuardState.PUBLIC_ACCESS,
            )
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.login_path),
            state=GuardState.UNAUTHENTICATED,
            remember_destination=path if policy.is_protected(path) else None,
        )

    if not isinstance(profile_state, ProfileReady):
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.recovery_path),
            state=GuardState.AUTHENTICATED_NO_PROFILE,
        )

    profile = profile_state.profile
    in_onboarding_flow = policy.is_onboarding_flow(path)
    gated = not policy.is_public(path) or policy.is_auth_entry(path)

    if not profile.onboarding_complete and gated and not in_onboarding_flow:
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.onboarding_path),
            state=GuardState.ONBOARDING_REQUIRED,
        )

    if profile.onboarding_complete and in_onboarding_flow:
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.default_authenticated_path),
            state=GuardState.ONBOARDING_ALREADY_DONE,
        )

    if profile.onboarding_complete and policy.is_auth_entry(path):
        return NavigationResolution(
            decision=NavigationDecision.redirect(policy.default_authenticated_path),
            state=GuardState.ALREADY_SIGNED_IN,
        )

    return NavigationResolution(decision=NavigationDecision.render(), state=GuardState.DEFAULT)


def resolve_navigation(
    snapshot: NavigationSnapshot,
    path: str,
    policy: NavigationPolicy,
) -> NavigationResolution:
    """
    Decide what to show for `path`.

    Never raises; every error state maps to a redirect target.

    Args:
        snapshot: Session state, profile state and loading time
        path: Requested path (query string and fragment are ignored)
        policy: Paths and timeout to apply

    Returns:
        NavigationResolution with the decision, the rule that matched and,
        for anonymous visitors to protected paths, the path to remember
    """
    path = normalize_path(path)
    resolution = _evaluate(snapshot, path, policy)

    decision = resolution.decision
    if decision.is_redirect and matches_route(path, decision.target):
        return NavigationResolution(decision=NavigationDecision.render(), state=resolution.state)
    return resolution
