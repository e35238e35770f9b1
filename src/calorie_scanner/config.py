"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    admin_email: str | None = None
    daily_scan_limit: int = 3
    rate_limit_requests: int = 10
    rate_limit_window_seconds: int = 60
    max_request_bytes: int = 6_000_000
    max_image_chars: int = 5_000_000
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_email(raw: str | None) -> str | None:
    """Normalize an email address for comparison."""
    if raw is None:
        return None
    cleaned = raw.strip().lower()
    return cleaned or None
