"""Rate limit policy and limiter configuration value objects.

A RateLimitPolicy is one requests-per-second / burst pair. A
RateLimiterConfig groups the policies the admission controller chooses from,
plus the IP whitelist and blacklist.

Usage:
    from trends_api.domain.value_objects import RateLimitPolicy, RateLimiterConfig

    config = RateLimiterConfig(
        global_policy=RateLimitPolicy(requests_per_second=10.0, burst=20),
        user_default=RateLimitPolicy(requests_per_second=5.0, burst=10),
        endpoint_policies={
            "/api/v1/auth/login": RateLimitPolicy(requests_per_second=2.0, burst=5),
        },
        role_policies={
            "admin": RateLimitPolicy(requests_per_second=50.0, burst=100),
        },
    )
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitPolicy:
    """Token bucket parameters for one policy (value object).

    Construction never raises: a policy with a zero or negative rate, or a
    burst below one, is representable so that a bad deployment config can be
    detected and replaced by the global policy instead of crashing startup.
    Use ``is_valid`` before building a bucket from it.

    Attributes:
        requests_per_second: Refill rate in tokens per second.
        burst: Bucket capacity (maximum tokens, burst size).
    """

    requests_per_second: float
    burst: int

    @property
    def is_valid(self) -> bool:
        """True when the policy can back a token bucket."""
        return self.requests_per_second > 0 and self.burst >= 1

    @property
    def seconds_per_token(self) -> float:
        """Seconds needed to refill a single token.

        Example:
            RateLimitPolicy(requests_per_second=2.0, burst=5).seconds_per_token  # 0.5
        """
        return 1.0 / self.requests_per_second


def _freeze(policies: Mapping[str, RateLimitPolicy] | None) -> Mapping[str, RateLimitPolicy]:
    return MappingProxyType(dict(policies or {}))


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimiterConfig:
    """Admission controller policy input (immutable after construction).

    Attributes:
        global_policy: Applied to anonymous requests (keyed by client IP) and
            used as the fallback for misconfigured policies.
        user_default: Applied to authenticated requests without a more
            specific rule.
        endpoint_policies: Exact route pattern -> policy. Takes precedence over
            role and user policies. No prefix or wildcard matching.
        role_policies: Role name -> policy. Takes precedence over the user
            default but not over endpoint policies.
        whitelist: IPs that bypass limiting entirely.
        blacklist: IPs that are always refused. Checked before the whitelist.
    """

    global_policy: RateLimitPolicy
    user_default: RateLimitPolicy
    endpoint_policies: Mapping[str, RateLimitPolicy] = field(
        default_factory=lambda: MappingProxyType({})
    )
    role_policies: Mapping[str, RateLimitPolicy] = field(
        default_factory=lambda: MappingProxyType({})
    )
    whitelist: frozenset[str] = frozenset()
    blacklist: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Callers may pass plain dicts / lists; store read-only copies.
        object.__setattr__(self, "endpoint_policies", _freeze(self.endpoint_policies))
        object.__setattr__(self, "role_policies", _freeze(self.role_policies))
        object.__setattr__(self, "whitelist", frozenset(self.whitelist))
        object.__setattr__(self, "blacklist", frozenset(self.blacklist))

    def with_ip_lists(
        self,
        *,
        whitelist: Iterable[str] = (),
        blacklist: Iterable[str] = (),
    ) -> "RateLimiterConfig":
        """Return a copy with extra IPs merged into the whitelist/blacklist.

        Args:
            whitelist: Additional IPs that bypass limiting.
            blacklist: Additional IPs to refuse.

        Returns:
            RateLimiterConfig: New config; this instance is unchanged.
        """
        return replace(
            self,
            whitelist=self.whitelist | frozenset(whitelist),
            blacklist=self.blacklist | frozenset(blacklist),
        )
