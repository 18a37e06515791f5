"""Configuration management for Inbox Sync.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INBOX_SYNC_ prefix (e.g., INBOX_SYNC_REQUEST_TIMEOUT).
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOX_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gmail Configuration
    gmail_user_id: str = Field(
        default="me",
        description="Gmail userId path parameter; 'me' is the token's own mailbox",
    )
    gmail_list_limit: int = Field(
        default=20,
        gt=0,
        description="maxResults sent with the message list request",
    )
    gmail_detail_batch_cap: int = Field(
        default=15,
        gt=0,
        description="Maximum number of listed messages whose details are fetched per sync",
    )
    gmail_metadata_headers: list[str] = Field(
        default_factory=lambda: ["From", "Subject", "Date"],
        description="Headers requested with format=metadata detail fetches",
    )
    request_timeout: float = Field(
        default=20.0,
        description="Timeout for a single Gmail API request in seconds",
    )
    max_concurrency: int = Field(
        default=15,
        gt=0,
        description="Upper bound on detail fetches in flight at once",
    )

    # Storage Configuration
    store_db_path: Path = Field(
        default=Path("inbox_sync.sqlite3"),
        description="Path to the SQLite database holding summaries and accounts",
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

    @field_validator("request_timeout")
    @classmethod
    def _check_timeout(cls, v: float) -> float:
        if not 1 <= v <= 120:
            raise ValueError("request_timeout must be between 1 and 120 seconds")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
