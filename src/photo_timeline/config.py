"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    kv_table: str = "kv_store"
    blob_bucket: str = "photos"
    cdn_url: str | None = None
    session_ttl_hours: int = 24
    session_cookie_name: str = "session"
    cookie_secure: bool = True
    default_page_size: int = 20
    max_page_size: int = 100
    thumbnail_max_width: int = 400
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_tags(raw: str | None) -> list[str]:
    """Parse a comma-separated tag string into trimmed, non-empty tags."""
    if raw is None:
        return []
    tags: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value:
            tags.append(value)
    return tags
