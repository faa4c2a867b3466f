"""
Centralized configuration for the Leadvault backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., LEDGER_*, SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Leadvault API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # direct Postgres URL, used by run_migrations.py only

    # Credit ledger
    ledger_backend: str = "supabase"  # "supabase" or "memory"
    default_reveal_cost: int = 1
    low_credit_threshold: int = 50
    low_credit_cooldown_seconds: float = 3600.0

    # Navigation guard
    loading_timeout_seconds: float = 10.0
    login_path: str = "/login"
    recovery_path: str = "/post-auth"
    onboarding_path: str = "/onboarding"
    welcome_path: str = "/welcome"
    default_authenticated_path: str = "/dashboard"
    protected_routes: list[str] = ["/dashboard", "/onboarding", "/welcome", "/post-auth"]
    public_routes: list[str] = [
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
    ]
    auth_entry_routes: list[str] = ["/login", "/signup"]
    unrecorded_routes: list[str] = ["/login", "/signup", "/auth/callback"]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
