import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from modules.ledger.models import RevealRecord
from modules.reveals import RevealedListingsCache


def record(listing_id):
    return RevealRecord(
        listing_id=listing_id,
        user_id="user-1",
        credit_cost=1,
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def ledger():
    mock = MagicMock()
    mock.list_revealed = AsyncMock(return_value=[record("a"), record("b")])
    return mock


class TestRevealedListingsCache:
    @pytest.mark.asyncio
    async def test_loads_once_within_ttl(self, ledger, clock):
        cache = RevealedListingsCache(ledger, ttl_seconds=300, clock=clock)

        assert await cache.get("user-1") == {"a", "b"}
        assert await cache.contains("user-1", "a")
        assert not await cache.contains("user-1", "z")

        ledger.list_revealed.assert_awaited_once_with("user-1")

    @pytest.mark.asyncio
    async def test_reloads_after_ttl(self, ledger, clock):
        cache = RevealedListingsCache(ledger, ttl_seconds=300, clock=clock)
        await cache.get("user-1")

        clock.advance(301)
        await cache.get("user-1")

        assert ledger.list_revealed.await_count == 2

    @pytest.mark.asyncio
    async def test_confirm_extends_loaded_entry(self, ledger, clock):
        cache = RevealedListingsCache(ledger, clock=clock)
        await cache.get("user-1")

        cache.confirm("user-1", ["c"])

        assert await cache.contains("user-1", "c")
        ledger.list_revealed.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_confirm_ignores_unloaded_users(self, ledger, clock):
        cache = RevealedListingsCache(ledger, clock=clock)
        cache.confirm("user-1", ["c"])

        # The ledger is asked, and it does not know about "c"
        assert not await cache.contains("user-1", "c")

    @pytest.mark.asyncio
    async def test_invalidate(self, ledger, clock):
        cache = RevealedListingsCache(ledger, clock=clock)
        await cache.get("user-1")

        cache.invalidate("user-1")
        await cache.get("user-1")

        assert ledger.list_revealed.await_count == 2

    @pytest.mark.asyncio
    async def test_expired_entries_are_evicted(self, ledger, clock):
        cache = RevealedListingsCache(ledger, ttl_seconds=300, clock=clock)
        await cache.get("user-1")
        await cache.get("user-2")
        assert len(cache) == 2

        clock.advance(301)
        await cache.get("user-3")

        assert len(cache) == 1
