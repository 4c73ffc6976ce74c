"""Named limiter configuration presets."""

from enum import Enum


class RateLimitPreset(str, Enum):
    """Limiter presets selectable at startup.

    DEVELOPMENT: Very high rates, loopback addresses whitelisted.
    DEFAULT: Moderate rates with endpoint and role policies.
    PRODUCTION: Tight bursts on login, registration, uploads and try-on.
    """

    DEVELOPMENT = "development"
    DEFAULT = "default"
    PRODUCTION = "production"
