"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    slash_command: str = "/grab-oncall"

    # Rootly
    rootly_api_key: str = ""
    rootly_api_base_url: str = "https://api.rootly.com/v1"
    rootly_schedule_id: str = ""
    rootly_timeout_seconds: float = 10.0
    rootly_users_cache_ttl: float = 300.0
    rootly_users_cache_warm: bool = False

    # Where override confirmations go; empty means the channel the request came from
    override_channel_id: str = ""

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
