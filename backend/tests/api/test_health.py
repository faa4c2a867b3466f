"""Tests for health check endpoints."""

import os
from unittest.mock import patch

from shared.config import get_settings


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_readiness_memory_backend(self, client):
        with patch.dict(os.environ, {"LEDGER_BACKEND": "memory", "SUPABASE_JWT_SECRET": "secret"}):
            get_settings.cache_clear()
            response = client.get("/api/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "ledger": "memory", "auth": "configured"}

    def test_readiness_supabase_backend(self, client):
        env = {
            "LEDGER_BACKEND": "supabase",
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "service-key",
            "SUPABASE_JWT_SECRET": "secret",
        }
        with patch.dict(os.environ, env):
            get_settings.cache_clear()
            data = client.get("/api/ready").json()

        assert data["status"] == "ready"
        assert data["ledger"] == "supabase"

    def test_not_ready_without_configuration(self, client):
        env = {
            "LEDGER_BACKEND": "supabase",
            "SUPABASE_URL": "",
            "SUPABASE_SERVICE_ROLE_KEY": "",
            "SUPABASE_JWT_SECRET": "",
        }
        with patch.dict(os.environ, env):
            get_settings.cache_clear()
            data = client.get("/api/ready").json()

        assert data == {"status": "not_ready", "ledger": "not_configured", "auth": "not_configured"}
