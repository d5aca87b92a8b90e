"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    insight_max_output_tokens: int = 500
    insight_timeout_seconds: float = 20.0
    whatsapp_phone: str = "5511958877900"
    chat_base_url: str = "https://wa.me"
    store_timeout_seconds: float = 10.0
    qr_redirect_delay_ms: int = 1500
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
