import asyncio

import pytest
from unittest.mock import AsyncMock

from conftest import FakeIdentityProvider, settle
from modules.profiles import (
    InMemoryProfileRepository,
    Profile,
    ProfileFetchError,
    ProfileLoading,
    ProfileNotFound,
    ProfileReady,
    ProfileStore,
)
from modules.profiles.exceptions import ProfileFetchFailedError
from modules.session import AuthEvent, Session, SessionStore


class GatedRepository(InMemoryProfileRepository):
    """Holds each fetch until the test opens that user's gate."""

    def __init__(self, profiles=None):
        super().__init__(profiles)
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []

    def gate(self, user_id: str) -> asyncio.Event:
        return self.gates.setdefault(user_id, asyncio.Event())

    async def get_by_user_id(self, user_id):
        self.calls.append(user_id)
        await self.gate(user_id).wait()
        return await super().get_by_user_id(user_id)


def session(user_id):
    return Session(user_id=user_id, access_token="token")


async def make_stores(repository, user_id="user-1"):
    provider = FakeIdentityProvider(session(user_id) if user_id else None)
    session_store = SessionStore(provider)
    profile_store = ProfileStore(repository, session_store)
    await session_store.initialize()
    return provider, session_store, profile_store


class TestProfileStore:
    @pytest.mark.asyncio
    async def test_loads_profile_for_signed_in_user(self):
        repo = InMemoryProfileRepository([Profile(user_id="user-1", credits_remaining=3)])
        _, _, store = await make_stores(repo)

        assert store.state == ProfileLoading(user_id="user-1")
        await settle()

        assert isinstance(store.state, ProfileReady)
        assert store.profile.credits_remaining == 3

    @pytest.mark.asyncio
    async def test_missing_profile(self):
        _, _, store = await make_stores(InMemoryProfileRepository())
        await settle()
        assert store.state == ProfileNotFound(user_id="user-1")

    @pytest.mark.asyncio
    async def test_no_session_is_not_found(self):
        _, _, store = await make_stores(InMemoryProfileRepository(), user_id=None)
        assert store.state == ProfileNotFound()

    @pytest.mark.asyncio
    async def test_fetch_error_is_distinct_from_not_found(self):
        repo = InMemoryProfileRepository()
        repo.get_by_user_id = AsyncMock(side_effect=ProfileFetchFailedError("timeout", "user-1"))
        _, _, store = await make_stores(repo)
        await settle()

        assert isinstance(store.state, ProfileFetchError)
        assert store.state.user_id == "user-1"
        assert "timeout" in store.state.message

    @pytest.mark.asyncio
    async def test_concurrent_refresh_shares_one_fetch(self):
        repo = GatedRepository([Profile(user_id="user-1")])
        _, _, store = await make_stores(repo)

        pending = [asyncio.ensure_future(store.refresh()) for _ in range(3)]
        await settle()
        repo.gate("user-1").set()
        results = await asyncio.gather(*pending)

        assert repo.calls == ["user-1"]
        assert all(isinstance(r, ProfileReady) for r in results)

    @pytest.mark.asyncio
    async def test_stale_fetch_for_previous_user_is_discarded(self):
        repo = GatedRepository([Profile(user_id="user-1"), Profile(user_id="user-2", credits_remaining=7)])
        provider, _, store = await make_stores(repo)
        await settle()

        provider.emit(AuthEvent.SIGNED_IN, session("user-2"))
        assert store.state == ProfileLoading(user_id="user-2")

        repo.gate("user-2").set()
        await settle()
        repo.gate("user-1").set()
        await settle()

        assert isinstance(store.state, ProfileReady)
        assert store.profile.user_id == "user-2"
        assert store.profile.credits_remaining == 7

    @pytest.mark.asyncio
    async def test_sign_out_drops_in_flight_result(self):
        repo = GatedRepository([Profile(user_id="user-1")])
        provider, _, store = await make_stores(repo)
        await settle()

        provider.emit(AuthEvent.SIGNED_OUT, None)
        repo.gate("user-1").set()
        await settle()

        assert store.state == ProfileNotFound()

    @pytest.mark.asyncio
    async def test_user_updated_refetches_and_keeps_profile_visible(self):
        repo = GatedRepository([Profile(user_id="user-1")])
        provider, _, store = await make_stores(repo)
        repo.gate("user-1").set()
        await settle()
        assert store.profile.onboarding_complete is False

        repo.gates["user-1"] = asyncio.Event()
        await repo.complete_onboarding("user-1")
        seen = []
        store.subscribe(seen.append)
        provider.emit(AuthEvent.USER_UPDATED, session("user-1"))
        await settle()

        # Still ready (stale) while the refetch is pending
        assert isinstance(store.state, ProfileReady)
        assert store.profile.onboarding_complete is False

        repo.gate("user-1").set()
        await settle()

        assert store.profile.onboarding_complete is True
        assert all(isinstance(s, ProfileReady) for s in seen)
        assert repo.calls == ["user-1", "user-1"]

    @pytest.mark.asyncio
    async def test_store_built_after_session_settled(self):
        """The store picks up a session that was resolved before it existed."""
        repo = InMemoryProfileRepository([Profile(user_id="user-1")])
        session_store = SessionStore(FakeIdentityProvider(session("user-1")))
        await session_store.initialize()

        store = ProfileStore(repo, session_store)
        state = await store.refresh()

        assert isinstance(state, ProfileReady)

    @pytest.mark.asyncio
    async def test_close_stops_following_session(self):
        repo = InMemoryProfileRepository([Profile(user_id="user-1")])
        provider, _, store = await make_stores(repo)
        await settle()

        store.close()
        provider.emit(AuthEvent.SIGNED_OUT, None)

        assert isinstance(store.state, ProfileReady)
