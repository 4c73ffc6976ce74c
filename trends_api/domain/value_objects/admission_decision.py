"""Admission decision value objects.

Returned by AdmissionProtocol.admit() for every request. A decision is always
returned, never an exception: denials are successful checks with a negative
answer.
"""

from dataclasses import dataclass

from trends_api.core.enums import ErrorCode
from trends_api.domain.enums import AdmissionOutcome

_MESSAGES = {
    ErrorCode.RATE_LIMIT_EXCEEDED: "Too many requests, please try again later",
    ErrorCode.IP_BLOCKED: "Your IP address has been blocked",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitHeaders:
    """Informational rate limit header values.

    Attributes:
        limit: Configured refill rate (requests per second).
        remaining: Whole tokens left in the bucket after this decision.
        reset_at: Unix timestamp one second ahead of the decision (fixed
            one-second refill horizon, not true time-to-next-token).
    """

    limit: float
    remaining: int
    reset_at: int

    def as_dict(self) -> dict[str, str]:
        """Render as HTTP response headers.

        Returns:
            dict[str, str]: X-RateLimit-Limit / -Remaining / -Reset.
        """
        return {
            "X-RateLimit-Limit": f"{self.limit:g}",
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class AdmissionDecision:
    """Outcome of one admission check.

    Attributes:
        outcome: ALLOWED, WHITELISTED, RATE_LIMITED or BLOCKED.
        key: Limiter key that governed the request (None when the bucket
            logic was bypassed by the whitelist or blacklist).
        headers: Header values computed from the bucket state after the
            decision (None when bypassed).
        retry_after: Seconds until one token is available (0 unless
            RATE_LIMITED).
    """

    outcome: AdmissionOutcome
    key: str | None = None
    headers: RateLimitHeaders | None = None
    retry_after: float = 0.0

    @property
    def allowed(self) -> bool:
        """True when the request may proceed downstream."""
        return self.outcome in (AdmissionOutcome.ALLOWED, AdmissionOutcome.WHITELISTED)

    @property
    def status_code(self) -> int:
        """HTTP status the handler layer must produce."""
        match self.outcome:
            case AdmissionOutcome.BLOCKED:
                return 403
            case AdmissionOutcome.RATE_LIMITED:
                return 429
            case _:
                return 200

    @property
    def error_code(self) -> ErrorCode | None:
        """Machine-readable code for denials, None when allowed."""
        match self.outcome:
            case AdmissionOutcome.BLOCKED:
                return ErrorCode.IP_BLOCKED
            case AdmissionOutcome.RATE_LIMITED:
                return ErrorCode.RATE_LIMIT_EXCEEDED
            case _:
                return None

    @property
    def error_message(self) -> str | None:
        """Client-facing message for denials, None when allowed."""
        code = self.error_code
        return _MESSAGES[code] if code is not None else None
