"""
Configuration settings for Task Bridge.
All sensitive values are loaded from environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Task Bridge"
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # monday.com
    monday_api_key: str = Field(default="")
    monday_api_url: str = Field(default="https://api.monday.com/v2")
    monday_request_timeout: float = Field(default=30.0)

    # Slack
    slack_bot_token: str = Field(default="")
    slack_request_timeout: int = Field(default=30)

    # Cache (seconds)
    cache_ttl: int = Field(default=3600)
    board_items_ttl: int = 300
    user_preferences_ttl: int = 86400
    task_ttl: int = 600

    # Aggregation
    board_batch_size: int = 25
    board_batch_delay: float = 0.1
    board_item_limit: int = Field(default=50)
    board_page_size: int = 100

    # Identity resolution (0 disables negative caching)
    identity_negative_ttl: int = Field(default=0)

    # Scheduler Settings
    timezone: str = Field(default="America/Los_Angeles")
    daily_summary_enabled: bool = Field(default=True)
    daily_summary_hour: int = Field(default=9)
    daily_summary_minute: int = Field(default=0)
    summary_max_tasks: int = 5


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the application settings."""
    return settings
