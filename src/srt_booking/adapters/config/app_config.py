"""12-factor configuration adapter using environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from srt_booking.adapters.srt_api.constants import SRT_BASE_URL

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    reload: bool = Field(default=False, description="Enable auto-reload for development")
    log_level: str = Field(default="INFO", description="Root log level")

    # SRT site configuration
    srt_base_url: str = Field(
        default=SRT_BASE_URL, description="Base URL of the SRT ticketing site"
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Timeout for each request to the SRT site in seconds"
    )
    upstream_min_delay_seconds: float = Field(
        default=0.0,
        description="Minimum delay between requests to the SRT site in seconds",
    )

    # Query configuration
    date_window_days: int = Field(
        default=14, description="Number of days checked when listing available dates"
    )
    date_query_concurrency: int = Field(
        default=4, description="Maximum concurrent searches while listing available dates"
    )

    # Rate limiting configuration
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of requests allowed per IP address per minute (0 disables)",
    )

    @field_validator("srt_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate the base URL is http(s) and strip any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("srt_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate the timeout is positive."""
        if v <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return v

    @field_validator("upstream_min_delay_seconds")
    @classmethod
    def validate_min_delay(cls, v: float) -> float:
        """Validate the delay is not negative."""
        if v < 0:
            raise ValueError("upstream_min_delay_seconds must not be negative")
        return v

    @field_validator("date_window_days", "date_query_concurrency")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts are at least one."""
        if v < 1:
            raise ValueError("date_window_days and date_query_concurrency must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be a logging level name, got '{v}'")
        return level
