"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    foods_table: str = "foods"
    overrides_table: str = "audit_events"
    catalog_path: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    polish_enabled: bool = False
    polish_timeout_seconds: float = 8.0
    scoring_workers: int = 1
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
