"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Durable session store
    database_url: str | None = None
    auto_create_schema: bool = True

    # Session cache
    redis_url: str | None = None
    session_cache_ttl_seconds: int = 24 * 3600

    # UI
    ui_origin: str = "http://localhost:5173"

    # Language model provider
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 5.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024

    # Conversation policy (completeness is measured on the critical fields)
    generation_threshold: int = 75
    extraction_confidence_threshold: float = 0.7
    refine_confidence_threshold: float = 0.8

    # Context windows (messages)
    history_window: int = 6
    prompt_history_turns: int = 4

    # Itinerary defaults
    default_trip_days: int = 3


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
