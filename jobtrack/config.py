"""
JobTrack - Application configuration.

Centralized configuration using Pydantic Settings for environment variable management.

Environment Variables:
    All settings can be overridden via environment variables with JOBTRACK_ prefix.

    Tracker API Settings:
        JOBTRACK_API_BASE_URL=...        - Base URL of the tracker REST API
        JOBTRACK_API_TIMEOUT=10          - Request timeout in seconds
        JOBTRACK_API_TOKEN=...           - Fallback bearer token when the caller sends none

    Calendar Settings:
        JOBTRACK_DEFAULT_YEAR=2025       - Year shown when no month is requested
        JOBTRACK_DEFAULT_MONTH=7         - Zero-based month shown when no month is requested
"""
from pydantic_settings import BaseSettings
from typing import Optional


class ApiSettings(BaseSettings):
    """
    Tracker API connection settings.

    The tracker API owns all job application, task and calendar data.
    This service only forwards requests to it.
    """
    api_base_url: str = "http://localhost:8000/api/v1"
    api_timeout: float = 10.0
    api_scrape_timeout: float = 30.0
    api_token: Optional[str] = None

    class Config:
        env_prefix = "JOBTRACK_"
        env_file = ".env"
        extra = "ignore"


class CalendarSettings(BaseSettings):
    """
    Calendar view defaults.

    When default_year is unset the current month is shown.
    """
    default_year: Optional[int] = None
    default_month: int = 0

    class Config:
        env_prefix = "JOBTRACK_"
        env_file = ".env"
        extra = "ignore"


class Settings(BaseSettings):
    """Combined application settings."""
    api: ApiSettings = ApiSettings()
    calendar: CalendarSettings = CalendarSettings()

    # CORS allowed origins (comma-separated, e.g. "http://localhost:19006,https://myapp.com")
    allowed_origins: str = "*"

    log_level: str = "INFO"

    class Config:
        env_prefix = "JOBTRACK_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
