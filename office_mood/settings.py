"""Service configuration loaded from the environment or a ``.env`` file."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Credentials ---
    slack_bot_token: str | None = Field(None, description="Slack bot token (xoxb-...)")
    openai_api_key: str | None = Field(None, description="OpenAI API key")
    slack_channel_ids: str | None = Field(
        None, description="Comma-separated Slack channel IDs to read"
    )

    # --- Upstream endpoints ---
    slack_api_url: str = "https://slack.com/api"
    openai_api_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.2
    http_timeout: float = 30.0

    # --- Aggregation window ---
    lookback_hours: float = 24
    recent_tier_hours: float = 1
    medium_tier_hours: float = 6
    history_page_size: int = 200
    max_history_pages: int = 5

    # --- Emoji directory ---
    emoji_cache_seconds: float = 3600

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 8000

    def require_slack_token(self) -> str:
        if not self.slack_bot_token:
            raise ConfigurationError("SLACK_BOT_TOKEN is not set")
        return self.slack_bot_token

    def require_openai_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        return self.openai_api_key

    def require_channel_ids(self) -> list[str]:
        """Parse SLACK_CHANNEL_IDS, dropping blanks."""
        raw = self.slack_channel_ids or ""
        channel_ids = [part.strip() for part in raw.split(",") if part.strip()]
        if not channel_ids:
            raise ConfigurationError("SLACK_CHANNEL_IDS is not set")
        return channel_ids


@lru_cache
def get_settings() -> Settings:
    return Settings()
