"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.3
    openai_max_tokens: int = 800
    default_daily_calories_goal: float = 1800
    default_daily_protein_goal: float = 75
    default_timezone: str = "UTC"
    parse_debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_api_key(raw: str | None) -> str | None:
    """Treat a blank API key the same as a missing one."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
