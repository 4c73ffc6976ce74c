"""Limiter key and policy selection.

Maps a request context to exactly one (scope, key, policy) triple using the
fixed precedence ENDPOINT > ROLE > USER > IP. Policies are never combined.

Misconfigured policies (non-positive rate, burst below one) are replaced at
construction time: endpoint and role policies fall back to the global
policy, and an invalid global or user default falls back to built-in
defaults. Each replacement is logged once.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trends_api.core.enums import ErrorCode
from trends_api.domain.enums import RateLimitScope
from trends_api.domain.value_objects import (
    RateLimiterConfig,
    RateLimitPolicy,
    RequestContext,
)

if TYPE_CHECKING:
    from trends_api.domain.protocols import LoggerProtocol

FALLBACK_GLOBAL_POLICY = RateLimitPolicy(requests_per_second=10.0, burst=20)
FALLBACK_USER_POLICY = RateLimitPolicy(requests_per_second=5.0, burst=10)


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedLimit:
    """Selected limiter for one request.

    Attributes:
        scope: Precedence level that matched.
        key: Limiter key (``endpoint:/api/v1/auth/login``, ``ip:10.0.0.1``...).
        policy: Valid policy backing the key's bucket.
    """

    scope: RateLimitScope
    key: str
    policy: RateLimitPolicy


class PolicyResolver:
    """Selects the single limiter that governs a request.

    Args:
        config: Limiter configuration.
        logger: Structured logger, used to report misconfigured policies.
    """

    def __init__(self, *, config: RateLimiterConfig, logger: LoggerProtocol) -> None:
        self._logger = logger
        self._global = self._sanitize(
            config.global_policy, fallback=FALLBACK_GLOBAL_POLICY, source="global"
        )
        self._user_default = self._sanitize(
            config.user_default, fallback=FALLBACK_USER_POLICY, source="user_default"
        )
        self._endpoints = self._sanitize_all(config.endpoint_policies, source="endpoint")
        self._roles = self._sanitize_all(config.role_policies, source="role")

    @property
    def global_policy(self) -> RateLimitPolicy:
        return self._global

    def resolve(self, context: RequestContext) -> ResolvedLimit:
        """Pick the limiter for ``context``.

        Lookups that miss fall through to the next precedence level.

        Args:
            context: Resolved request identity and route.

        Returns:
            ResolvedLimit: Scope, key and policy for the request.
        """
        endpoint_policy = self._endpoints.get(context.route)
        if endpoint_policy is not None:
            return ResolvedLimit(
                scope=RateLimitScope.ENDPOINT,
                key=RateLimitScope.ENDPOINT.key_for(context.route),
                policy=endpoint_policy,
            )

        if context.user_id is not None:
            user_id = str(context.user_id)
            if context.role is not None:
                role_policy = self._roles.get(context.role)
                if role_policy is not None:
                    return ResolvedLimit(
                        scope=RateLimitScope.ROLE,
                        key=RateLimitScope.ROLE.key_for(f"{context.role}:{user_id}"),
                        policy=role_policy,
                    )
            return ResolvedLimit(
                scope=RateLimitScope.USER,
                key=RateLimitScope.USER.key_for(user_id),
                policy=self._user_default,
            )

        return ResolvedLimit(
            scope=RateLimitScope.IP,
            key=RateLimitScope.IP.key_for(context.ip),
            policy=self._global,
        )

    def _sanitize_all(
        self, policies: Mapping[str, RateLimitPolicy], *, source: str
    ) -> dict[str, RateLimitPolicy]:
        return {
            name: self._sanitize(policy, fallback=self._global, source=source, name=name)
            for name, policy in policies.items()
        }

    def _sanitize(
        self,
        policy: RateLimitPolicy,
        *,
        fallback: RateLimitPolicy,
        source: str,
        name: str | None = None,
    ) -> RateLimitPolicy:
        if policy.is_valid:
            return policy
        self._logger.warning(
            "Invalid rate limit policy - using fallback policy",
            error_code=ErrorCode.RATE_LIMIT_MISCONFIGURED.value,
            source=source,
            name=name,
            requests_per_second=policy.requests_per_second,
            burst=policy.burst,
            fallback_requests_per_second=fallback.requests_per_second,
            fallback_burst=fallback.burst,
        )
        return fallback
