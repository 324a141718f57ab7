"""
Configuration management for LearnDeck
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database Configuration
    database_url: str = Field(default="sqlite:///data/learndeck.db")

    # Application Configuration
    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)

    # Study Session Configuration
    default_session_limit: int = Field(default=20, ge=1)
    default_ordering_policy: str = Field(default="priority_interleave")
    session_timeout_hours: int = Field(default=24, ge=1)
    persist_retry_attempts: int = Field(default=1, ge=0)

    # Selection and Ordering Thresholds
    failed_accuracy_threshold: float = Field(default=0.5, gt=0.0, le=1.0)
    priority_accuracy_threshold: float = Field(default=0.6, gt=0.0, le=1.0)
    overdue_priority_days: int = Field(default=2, ge=0)
    small_session_size: int = Field(default=5, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_database_path() -> str:
    """Get the database file path from URL"""
    settings = get_settings()
    if settings.database_url.startswith("sqlite:///"):
        return settings.database_url.replace("sqlite:///", "")
    return "data/learndeck.db"
