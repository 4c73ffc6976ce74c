"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables. The
deployment (docker compose, systemd unit, CI job) decides which variables are
set; nothing here reads files.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from trends_api.core.config import settings

    if settings.rate_limit_enabled:
        ...

    # Environment detection
    if settings.is_production:
        ...
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trends_api.core.enums import Environment
from trends_api.domain.enums.rate_limit_preset import RateLimitPreset


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (every field has a safe default)
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
        default="7ftrends API",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Admission control
    rate_limit_enabled: bool = Field(
        default=True,
        description="Run every request through the admission controller",
    )
    rate_limit_preset: RateLimitPreset | None = Field(
        default=None,
        description="Force a limiter preset (development, default, production). "
        "Derived from the environment when unset.",
    )
    rate_limit_whitelist: str = Field(
        default="",
        description="Extra comma-separated IPs that bypass rate limiting",
    )
    rate_limit_blacklist: str = Field(
        default="",
        description="Extra comma-separated IPs that are always refused (HTTP 403)",
    )
    rate_limit_idle_ttl_seconds: float = Field(
        default=300.0,
        description="Evict a bucket after this many seconds without a request",
    )
    rate_limit_max_entries: int = Field(
        default=10_000,
        description="Registry size that triggers the oversize eviction valve",
    )
    rate_limit_sweep_interval_seconds: float = Field(
        default=60.0,
        description="Seconds between background registry sweeps",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("rate_limit_whitelist", "rate_limit_blacklist")
    @classmethod
    def normalize_ip_list(cls, v: str) -> str:
        """
        Strip whitespace around comma-separated IP entries.

        Args:
            v: Comma-separated IP string.

        Returns:
            str: Normalized comma-separated IP string.
        """
        return ",".join(ip.strip() for ip in v.split(",") if ip.strip())

    @field_validator(
        "rate_limit_idle_ttl_seconds",
        "rate_limit_max_entries",
        "rate_limit_sweep_interval_seconds",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """
        Reject zero or negative registry tuning values.

        Raises:
            ValueError: If the value is not positive.
        """
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @property
    def whitelisted_ips(self) -> frozenset[str]:
        """Extra whitelisted IPs as a set."""
        return frozenset(ip for ip in self.rate_limit_whitelist.split(",") if ip)

    @property
    def blacklisted_ips(self) -> frozenset[str]:
        """Extra blacklisted IPs as a set."""
        return frozenset(ip for ip in self.rate_limit_blacklist.split(",") if ip)

    @property
    def effective_rate_limit_preset(self) -> RateLimitPreset:
        """
        Limiter preset to load at startup.

        An explicit RATE_LIMIT_PRESET wins. Otherwise development maps to the
        lenient preset, production to the strict one, and everything else to
        the default preset.
        """
        if self.rate_limit_preset is not None:
            return self.rate_limit_preset
        if self.is_development:
            return RateLimitPreset.DEVELOPMENT
        if self.is_production:
            return RateLimitPreset.PRODUCTION
        return RateLimitPreset.DEFAULT

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """True if environment is DEVELOPMENT."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """True if environment is TESTING or CI."""
        return self.environment in (Environment.TESTING, Environment.CI)

    @property
    def is_production(self) -> bool:
        """True if environment is PRODUCTION."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
