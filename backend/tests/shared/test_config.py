"""Tests for shared/config.py."""

from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings()
        assert settings.app_name == "Leadvault API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.ledger_backend == "supabase"
        assert settings.default_reveal_cost == 1
        assert settings.low_credit_threshold == 50

    def test_navigation_defaults(self):
        settings = Settings()
        assert settings.loading_timeout_seconds == 10.0
        assert settings.recovery_path == "/post-auth"
        assert settings.default_authenticated_path == "/dashboard"
        assert "/dashboard" in settings.protected_routes
        assert "/pricing" in settings.public_routes
        assert settings.auth_entry_routes == ["/login", "/signup"]

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000", "LEDGER_BACKEND": "memory"}):
            settings = Settings()
            assert settings.debug is True
            assert settings.port == 9000
            assert settings.ledger_backend == "memory"

    def test_loads_route_lists_from_env(self):
        """List settings are read as JSON."""
        with patch.dict(os.environ, {"PROTECTED_ROUTES": '["/dashboard", "/leads"]'}):
            settings = Settings()
            assert settings.protected_routes == ["/dashboard", "/leads"]

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
            "SUPABASE_JWT_SECRET": "jwt-secret",
        }):
            settings = Settings()
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_service_role_key == "test-service-key"
            assert settings.supabase_jwt_secret == "jwt-secret"


class TestGetSettings:
    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()
        assert isinstance(settings1, Settings)
        assert settings1 is settings2

    def test_cache_clear_reloads(self):
        first = get_settings()
        get_settings.cache_clear()
        assert get_settings() is not first
