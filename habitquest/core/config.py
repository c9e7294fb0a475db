"""Configuration management for habitquest."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HABITQUEST_",
        case_sensitive=False,
        extra="ignore",
    )

    # Time Configuration
    default_timezone: str = Field(
        default="UTC", description="IANA timezone used when the caller does not supply one"
    )
    grace_period_hours: int = Field(
        default=6, ge=0, description="Hours after a due date during which a late completion still counts"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    service_name: str = Field(default="habitquest", description="Service name reported to Logfire")
    environment: str = Field(default="production", description="Deployment environment reported to Logfire")


# Application Constants
class Constants:
    """Fixed progression constants."""

    # Streak multiplier
    STREAK_MULTIPLIER_INTERVAL: int = 5  # Apply multiplier every 5 days
    STREAK_MULTIPLIER_RATE: float = 1.1  # 1.1x per completed interval
    MAX_STREAK_MULTIPLIER: float = 2.0

    # Leveling
    LEVEL_XP_BASE: int = 100  # Level L starts at (L-1)^2 * 100 XP

    # Stats
    XP_PER_STAT_POINT: int = 25
    COMPLETIONS_PER_STAT_POINT: int = 5
    BASE_STAT_VALUE: int = 5
    STAT_CEILING: int = 100
    STAT_POINTS_PER_LEVEL: int = 2

    # Recurrence
    ONE_TIME_HORIZON_YEARS: int = 100  # "ONCE" tasks are next due a century later
    UPCOMING_DUE_HORIZON_HOURS: int = 48

    # Event bonus
    DEFAULT_EVENT_MULTIPLIER: float = 1.5


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
