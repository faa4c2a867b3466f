"""Tests for the service container."""

import os
from unittest.mock import MagicMock, patch

from api.dependencies import ServiceContainer, get_container, reset_container
from modules.ledger import CreditLedger, SupabaseCreditLedger
from modules.profiles import InMemoryProfileRepository, ProfileRepository
from modules.reveals import RevealService


class TestServiceContainer:
    def test_memory_backend(self):
        with patch.dict(os.environ, {"LEDGER_BACKEND": "memory"}):
            container = ServiceContainer()
            assert isinstance(container.profiles, InMemoryProfileRepository)
            assert isinstance(container.ledger, CreditLedger)
            assert isinstance(container.reveals, RevealService)
            assert container.ledger is container.ledger

    @patch("shared.database.get_supabase_client")
    def test_supabase_backend(self, mock_client):
        mock_client.return_value = MagicMock()
        with patch.dict(os.environ, {"LEDGER_BACKEND": "supabase"}):
            container = ServiceContainer()
            assert isinstance(container.profiles, ProfileRepository)
            assert isinstance(container.ledger, SupabaseCreditLedger)

    def test_navigation_policy_from_settings(self):
        with patch.dict(os.environ, {"LOADING_TIMEOUT_SECONDS": "4"}):
            assert ServiceContainer().navigation_policy.loading_timeout_seconds == 4

    def test_reset(self):
        with patch.dict(os.environ, {"LEDGER_BACKEND": "memory"}):
            container = ServiceContainer()
            ledger = container.ledger
            container.reset()
            assert container.ledger is not ledger


def test_get_container_singleton():
    container = get_container()
    assert get_container() is container
    reset_container()
    assert get_container() is not container
