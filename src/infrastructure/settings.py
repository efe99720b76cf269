"""Application settings loaded from environment variables via Pydantic."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from domain.models.query import MAX_PAGE_SIZE


class AppSettings(BaseSettings):
    """Central configuration for the recruiting back-office."""

    model_config = {"env_prefix": "APP_", "case_sensitive": False}

    # Supabase project
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_jwt_audience: str = "authenticated"

    # Table loading
    page_size: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)
    fetch_timeout_seconds: float = 15.0
    fetch_max_attempts: int = 3
    fetch_backoff_seconds: float = 1.0
    fetch_cooldown_seconds: float = 2.0
    mount_debounce_seconds: float = 0.3
    navigation_debounce_seconds: float = 0.3
    visibility_debounce_seconds: float = 0.5

    # Event reminders
    reminder_window_days: int = 2

    # Celery
    celery_broker_url: str = "redis://localhost:6379/1"
    celery_result_backend: str = "redis://localhost:6379/2"

    # Logging
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"


def get_settings() -> AppSettings:
    """Return a freshly loaded settings object."""
    return AppSettings()
