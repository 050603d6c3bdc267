"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_text_model: str = "gpt-5.2"
    openai_image_model: str = "gpt-image-1"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


class ClientSettings(BaseSettings):
    """Settings for the client-side state layer."""

    api_base_url: str = "http://localhost:3001/api"
    api_timeout_seconds: float = 30.0
    notification_seconds: float = 3.0
    reduced_motion: bool = False
    image_cdn_host: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="CHEFNOTE_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def ai_enabled(settings: Settings) -> bool:
    """Return True when an OpenAI key is configured."""
    return bool(settings.openai_api_key and settings.openai_api_key.strip())
