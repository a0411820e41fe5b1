"""Configuration management for Vehicle Insight.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the VEHICLE_INSIGHT_ prefix (e.g., VEHICLE_INSIGHT_MAX_MESSAGES).
    """

    model_config = SettingsConfigDict(
        env_prefix="VEHICLE_INSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Notification source
    notification_sender: str = Field(
        default="BuyItNow@digitalrecognition.net",
        description="Address that sends the vehicle hit notifications",
    )
    domain_keyword: str = Field(
        default="DRN",
        description="Sender brand keyword expected in notification subjects",
    )
    notification_phrase: str = Field(
        default="Buy It Now Hit",
        description="Fixed phrase expected in notification subjects",
    )
    field_keyword: str = Field(
        default="VIN",
        description="Field label expected in notification subjects",
    )

    # Gmail Configuration
    gmail_user_id: str = Field(
        default="me",
        description="Gmail user id used for API calls",
    )
    gmail_scope: str = Field(
        default="https://www.googleapis.com/auth/gmail.readonly",
        description="OAuth scope the supplied credential was granted",
    )
    search_page_size: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum number of message ids returned per search query",
    )
    max_messages: int = Field(
        default=20,
        ge=1,
        description="Maximum number of candidate messages fetched per run",
    )
    fetch_concurrency: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Maximum number of message fetches in flight",
    )

    # Display
    date_format: str = Field(
        default="%m/%d/%Y",
        description="strftime format for the rendered receipt date",
    )
    time_format: str = Field(
        default="%I:%M:%S %p",
        description="strftime format for the rendered receipt time",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
