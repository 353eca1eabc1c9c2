"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

SESSION_TTL_SECONDS = 60 * 60 * 24


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    public_base_url: str | None = None
    qr_image_base_url: str = "https://api.qrserver.com/v1/create-qr-code/"
    qr_image_size: int = 300
    session_ttl_seconds: int = SESSION_TTL_SECONDS
    events_file: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_base_url(configured: str | None, request_base_url: str) -> str:
    """Return the absolute base URL used when encoding clue links."""
    base = (configured or "").strip() or request_base_url
    return base.rstrip("/")
