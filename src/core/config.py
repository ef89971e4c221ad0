"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Fixed implementation details live in src/core/constants.py instead

Usage:
    from src.core.config import settings

    base_url = settings.backend_api_base_url
    interval = settings.poll_interval_seconds

    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (only for non-sensitive config)
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="CloudSpend Connect",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # API configuration
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL of this API (used in problem type URIs)",
    )
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API v1 route prefix",
    )
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    # Cost-dashboard backend
    backend_api_base_url: str = Field(
        default="http://localhost:3001/api",
        description="Base URL of the cost-dashboard backend API",
    )
    backend_api_token: str | None = Field(
        default=None,
        description="Bearer token sent to the backend API (optional)",
    )
    backend_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single backend API call in seconds",
    )

    # Connection workflow
    poll_interval_seconds: float = Field(
        default=10.0,
        description="Seconds between connection status checks",
    )
    poll_max_attempts: int = Field(
        default=36,
        description="Status checks before the workflow times out (36 x 10s = 6 minutes)",
    )
    fallback_verify_every: int = Field(
        default=3,
        description="Run a fallback verification every N ticks when push confirmation is unavailable",
    )
    default_connection_kind: str = Field(
        default="billing",
        description="Connection kind requested when the caller does not specify one",
    )
    workflow_idle_ttl_seconds: float = Field(
        default=1800.0,
        description="Evict a workflow nobody has read for this many seconds",
    )
    workflow_max_count: int = Field(
        default=1000,
        description="Live workflows kept before the least recently used is evicted",
    )

    # Events
    event_bus_type: str = Field(
        default="in-memory",
        description="Event bus implementation (in-memory)",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_base_url", "backend_api_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, v: str) -> list[str]:
        """
        Parse comma-separated CORS origins.

        Args:
            v: Comma-separated origins string.

        Returns:
            list[str]: List of origin URLs.
        """
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @field_validator(
        "poll_interval_seconds", "backend_timeout_seconds", "workflow_idle_ttl_seconds"
    )
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        """
        Validate durations are strictly positive.

        Raises:
            ValueError: If the duration is zero or negative.
        """
        if v <= 0:
            raise ValueError("duration must be greater than 0 seconds")
        return v

    @field_validator("poll_max_attempts", "fallback_verify_every", "workflow_max_count")
    @classmethod
    def validate_at_least_one(cls, v: int) -> int:
        """
        Validate counters are at least 1.

        Raises:
            ValueError: If the value is less than 1.
        """
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("default_connection_kind")
    @classmethod
    def validate_connection_kind(cls, v: str) -> str:
        """
        Validate the default connection kind is a known kind.

        Raises:
            ValueError: If the kind is not billing or resource.
        """
        normalized = v.strip().lower()
        if normalized not in {"billing", "resource"}:
            raise ValueError("default_connection_kind must be 'billing' or 'resource'")
        return normalized

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """Check if running in CI environment."""
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def poll_timeout_seconds(self) -> float:
        """Upper bound on automatic detection time."""
        return self.poll_interval_seconds * self.poll_max_attempts


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
