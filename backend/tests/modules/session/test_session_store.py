import pytest
from unittest.mock import AsyncMock

from conftest import FakeIdentityProvider
from modules.session import AuthEvent, IIdentityProvider, Session, SessionState, SessionStore


def make_session(user_id="user-1"):
    return Session(user_id=user_id, email=f"{user_id}@example.com", access_token="token")


class TestSessionState:
    def test_initial_state_is_unsettled(self):
        state = SessionState()
        assert state.initialized is False
        assert state.loading is True
        assert state.is_authenticated is False
        assert state.user_id is None
        assert state.is_settled is False

    def test_session_requires_user_id(self):
        with pytest.raises(Exception):
            Session(user_id="")


class TestSessionStore:
    def test_provider_protocol(self):
        assert isinstance(FakeIdentityProvider(), IIdentityProvider)

    @pytest.mark.asyncio
    async def test_initialize_with_session(self):
        store = SessionStore(FakeIdentityProvider(make_session()))
        assert store.state.initialized is False

        state = await store.initialize()

        assert state.initialized is True
        assert state.loading is False
        assert state.user_id == "user-1"
        assert state.last_event == AuthEvent.INITIAL_SESSION

    @pytest.mark.asyncio
    async def test_initialize_without_session(self):
        """Determined absent: initialized but no session."""
        store = SessionStore(FakeIdentityProvider(None))
        state = await store.initialize()
        assert state.is_settled
        assert state.session is None

    @pytest.mark.asyncio
    async def test_initialize_twice_is_noop(self):
        provider = FakeIdentityProvider(make_session())
        provider.get_session = AsyncMock(return_value=make_session())
        store = SessionStore(provider)

        await store.initialize()
        await store.initialize()

        provider.get_session.assert_awaited_once()
        assert len(provider.callbacks) == 1

    @pytest.mark.asyncio
    async def test_events_update_state_and_notify(self):
        provider = FakeIdentityProvider(None)
        store = SessionStore(provider)
        await store.initialize()
        seen = []
        store.subscribe(seen.append)

        provider.emit(AuthEvent.SIGNED_IN, make_session("user-2"))
        provider.emit(AuthEvent.TOKEN_REFRESHED, make_session("user-2"))

        assert [s.last_event for s in seen] == [AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED]
        assert store.session.user_id == "user-2"

    @pytest.mark.asyncio
    async def test_same_session_event_is_still_published(self):
        """A USER_UPDATED with an unchanged session still reaches subscribers."""
        session = make_session()
        provider = FakeIdentityProvider(session)
        store = SessionStore(provider)
        await store.initialize()
        seen = []
        store.subscribe(seen.append)

        provider.emit(AuthEvent.USER_UPDATED, session)

        assert len(seen) == 1
        assert seen[0].last_event == AuthEvent.USER_UPDATED

    @pytest.mark.asyncio
    async def test_signed_out_event_clears_session(self):
        provider = FakeIdentityProvider(make_session())
        store = SessionStore(provider)
        await store.initialize()

        provider.emit(AuthEvent.SIGNED_OUT, make_session())

        assert store.session is None
        assert store.state.initialized is True

    @pytest.mark.asyncio
    async def test_sign_out(self):
        provider = FakeIdentityProvider(make_session())
        store = SessionStore(provider)
        await store.initialize()

        await store.sign_out()

        assert provider.sign_out_calls == 1
        assert store.session is None
        assert store.state.last_event == AuthEvent.SIGNED_OUT

    @pytest.mark.asyncio
    async def test_close_stops_listening(self):
        provider = FakeIdentityProvider(None)
        store = SessionStore(provider)
        await store.initialize()

        store.close()
        provider.emit(AuthEvent.SIGNED_IN, make_session())

        assert store.session is None
        assert provider.callbacks == []
