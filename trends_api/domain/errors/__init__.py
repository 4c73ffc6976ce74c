"""Domain errors package."""

from trends_api.domain.errors.rate_limit_error import RateLimitError

__all__ = ["RateLimitError"]
