"""Rate Limit error types.

Usage:
    from trends_api.domain.errors import RateLimitError
    from trends_api.core.enums import ErrorCode
    from trends_api.core.result import Failure

    return Failure(error=RateLimitError(
        code=ErrorCode.RATE_LIMIT_BUCKET_NOT_FOUND,
        message="No live bucket for key ip:203.0.113.7",
    ))
"""

from dataclasses import dataclass

from trends_api.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Admission control operation failure.

    A rate limit DENIAL is NOT an error - admit() returns a decision with
    outcome RATE_LIMITED. This type is for administrative operations that
    can genuinely fail (resetting a bucket that does not exist).

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        details: Additional context (key, etc.).
    """

    pass  # Inherits all fields from DomainError
