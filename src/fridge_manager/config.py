"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gateway_url: str = "http://localhost:3001"
    gateway_timeout_seconds: float = 10
    local_store_dir: str = ".fridge_manager"
    debounce_seconds: float = 0.5
    expiring_window_days: int = 3
    strict_recipe_matching: bool = False
    storage_backend: str = "file"
    data_dir: str = "data"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "collections"
    cors_allow_origins: str | None = "*"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    origins = [chunk.strip() for chunk in raw.split(",") if chunk.strip()]
    return origins or ["*"]
