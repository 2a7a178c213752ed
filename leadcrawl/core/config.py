"""Configuration module for the leadcrawl service.

Provides Pydantic-based configuration management with environment variable support
and field validation.

Example:
    >>> from leadcrawl.core.config import Settings
    >>> settings = Settings(navigation_timeout_ms=15000)
    >>> print(settings.cache_ttl_seconds)
    2592000
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 30 days
DEFAULT_CACHE_TTL_SECONDS = 30 * 24 * 60 * 60

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Crawl engine configuration.

    Attributes:
        navigation_timeout_ms: Headless navigation timeout per page
        http_timeout_seconds: Timeout for plain GET requests
        headless: Run Chromium without a visible window
        user_agent: Optional User-Agent override for both fetch strategies
        max_emails_per_page: Per-page cap on accepted email matches
        max_pages_per_seed: Optional cap on pages fetched per seed (None = unbounded)
        same_domain: Only follow links on the seed's host
        block_private_networks: Reject seeds that target private/internal hosts
        cache_ttl_seconds: Lifetime of cached crawl results
        activity_log_dir: Directory for the daily activity log files
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to the rotating application log

    Raises:
        ValidationError: If values are invalid

    Example:
        >>> settings = Settings(max_pages_per_seed=25, same_domain=True)
        >>> settings.headless
        True
    """

    # Fetching
    navigation_timeout_ms: int = 10000
    http_timeout_seconds: float = 10.0
    headless: bool = True
    user_agent: str | None = None

    # Crawl policy
    max_emails_per_page: int = 5
    max_pages_per_seed: int | None = None
    same_domain: bool = False
    block_private_networks: bool = False

    # Cache
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS

    # Logging
    activity_log_dir: Path = Path("logs")
    log_level: str = "INFO"
    log_file: Path = Path(".cache/leadcrawl.log")

    model_config = SettingsConfigDict(
        env_prefix="LEADCRAWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator(
        "navigation_timeout_ms",
        "http_timeout_seconds",
        "max_emails_per_page",
        "cache_ttl_seconds",
    )
    @classmethod
    def validate_positive(cls: type["Settings"], v: float) -> float:
        """Validate timeouts, caps and TTL are positive.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Value to check

        Returns:
            Validated value

        Raises:
            ValueError: If the value is zero or negative
        """
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("max_pages_per_seed")
    @classmethod
    def validate_max_pages(cls: type["Settings"], v: int | None) -> int | None:
        """Validate the optional page cap is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("max_pages_per_seed must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls: type["Settings"], v: str) -> str:
        """Normalize the log level and reject unknown names."""
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}")
        return level
