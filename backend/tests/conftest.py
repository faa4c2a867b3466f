"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import asyncio

import pytest
from datetime import datetime, timezone, timedelta
import jwt  # PyJWT
from fastapi.testclient import TestClient

# The app package wires the module routers; it has to be imported before any
# modules.*.routes file.
import api  # noqa: F401
from api.app import create_app
from api.dependencies import (
    get_auth_service,
    get_profile_repository,
    get_reveal_service,
    reset_container,
)
from modules.auth.service import AuthService, reset_auth_service
from modules.ledger import CreditLedger
from modules.profiles import InMemoryProfileRepository, Profile
from modules.reveals import RevealService
from shared.config import get_settings


# Test JWT secret (only for testing - matches tests/modules/auth)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        secret: Signing secret (use another value to forge a bad signature)

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset settings, the auth service and the service container around each test."""
    get_settings.cache_clear()
    reset_auth_service()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_auth_service()
    reset_container()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


class FakeIdentityProvider:
    """Identity provider whose auth events are fired by the test."""

    def __init__(self, session=None):
        self.session = session
        self.callbacks = []
        self.sign_out_calls = 0

    async def get_session(self):
        return self.session

    def on_auth_state_change(self, callback):
        self.callbacks.append(callback)
        return lambda: self.callbacks.remove(callback)

    async def sign_out(self):
        self.sign_out_calls += 1
        self.session = None

    def emit(self, event, session):
        self.session = session
        for callback in list(self.callbacks):
            callback(event, session)


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run to completion."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def profiles(test_user_id):
    """In-memory profile rows: the test user is onboarded with 5 credits."""
    return InMemoryProfileRepository(
        [Profile(user_id=test_user_id, credits_remaining=5, onboarding_complete=True)]
    )


@pytest.fixture
def reveal_service(profiles):
    return RevealService(CreditLedger(profiles))


@pytest.fixture
def client(profiles, reveal_service):
    """TestClient wired to the in-memory backend and the test JWT secret."""
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: AuthService(jwt_secret=TEST_JWT_SECRET)
    app.dependency_overrides[get_profile_repository] = lambda: profiles
    app.dependency_overrides[get_reveal_service] = lambda: reveal_service
    return TestClient(app)
