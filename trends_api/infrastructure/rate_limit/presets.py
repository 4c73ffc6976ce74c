"""Limiter configuration presets.

Three named configurations selected at startup from the environment:

    DEVELOPMENT: lenient, loopback addresses whitelisted
    DEFAULT: moderate rates, stricter limits on sensitive endpoints
    PRODUCTION: tight bursts on login, registration, uploads and AI try-on

Endpoint keys are exact route patterns as produced by the router.

Usage:
    from trends_api.domain.enums import RateLimitPreset
    from trends_api.infrastructure.rate_limit.presets import get_preset

    config = get_preset(RateLimitPreset.PRODUCTION)
"""

from trends_api.domain.enums import RateLimitPreset
from trends_api.domain.value_objects import RateLimiterConfig, RateLimitPolicy

LOGIN_ROUTE = "/api/v1/auth/login"
REGISTER_ROUTE = "/api/v1/auth/register"
UPLOAD_ROUTE = "/api/v1/upload"
TRYON_ROUTE = "/api/v1/tryon"


def _policy(requests_per_second: float, burst: int) -> RateLimitPolicy:
    return RateLimitPolicy(requests_per_second=requests_per_second, burst=burst)


DEVELOPMENT_CONFIG = RateLimiterConfig(
    global_policy=_policy(100.0, 200),
    user_default=_policy(50.0, 100),
    whitelist=frozenset({"127.0.0.1", "::1", "localhost"}),
)

DEFAULT_CONFIG = RateLimiterConfig(
    global_policy=_policy(10.0, 20),
    user_default=_policy(5.0, 10),
    endpoint_policies={
        LOGIN_ROUTE: _policy(2.0, 5),
        REGISTER_ROUTE: _policy(1.0, 3),
        UPLOAD_ROUTE: _policy(2.0, 5),
        TRYON_ROUTE: _policy(1.0, 3),  # AI image compositing is expensive
    },
    role_policies={
        "admin": _policy(50.0, 100),
        "moderator": _policy(20.0, 40),
        "premium": _policy(15.0, 30),
    },
)

PRODUCTION_CONFIG = RateLimiterConfig(
    global_policy=_policy(5.0, 10),
    user_default=_policy(2.0, 5),
    endpoint_policies={
        LOGIN_ROUTE: _policy(1.0, 3),
        REGISTER_ROUTE: _policy(0.5, 2),
        UPLOAD_ROUTE: _policy(1.0, 3),
        TRYON_ROUTE: _policy(0.5, 2),
    },
    role_policies={
        "admin": _policy(25.0, 50),
        "moderator": _policy(10.0, 20),
        "premium": _policy(7.5, 15),
    },
)

_PRESETS: dict[RateLimitPreset, RateLimiterConfig] = {
    RateLimitPreset.DEVELOPMENT: DEVELOPMENT_CONFIG,
    RateLimitPreset.DEFAULT: DEFAULT_CONFIG,
    RateLimitPreset.PRODUCTION: PRODUCTION_CONFIG,
}


def get_preset(preset: RateLimitPreset) -> RateLimiterConfig:
    """Return the limiter configuration for ``preset``."""
    return _PRESETS[preset]
