"""Admission controller implementing AdmissionProtocol.

Gates every inbound request through identity-aware, precedence-ordered rate
limiting before it reaches business logic:

    1. Blacklisted IP  -> BLOCKED (403, IP_BLOCKED), no bucket consulted
    2. Whitelisted IP  -> WHITELISTED, no bucket, no headers
    3. Resolve key     -> endpoint > role > user > ip
    4. Get/create bucket (double-checked, one bucket per key)
    5. Consume a token -> ALLOWED, or RATE_LIMITED (429) with nothing consumed

Architecture:
    AdmissionMiddleware -> AdmissionController -> PolicyResolver
                                               -> LimiterRegistry -> TokenBucket

The controller is purely in-memory and CPU-bound. It never awaits, never
waits for refill and never raises to its caller.

Usage:
    from trends_api.core.container import get_admission_controller

    controller = get_admission_controller()
    decision = controller.admit(
        RequestContext(ip="203.0.113.7", route="/api/v1/auth/login")
    )
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from trends_api.core.enums import ErrorCode
from trends_api.core.result import Failure, Result, Success
from trends_api.domain.enums import AdmissionOutcome
from trends_api.domain.errors import RateLimitError
from trends_api.domain.value_objects import (
    AdmissionDecision,
    RateLimiterConfig,
    RateLimitHeaders,
    RequestContext,
)
from trends_api.infrastructure.rate_limit.limiter_registry import LimiterRegistry
from trends_api.infrastructure.rate_limit.policy_resolver import PolicyResolver

if TYPE_CHECKING:
    from trends_api.domain.protocols import LoggerProtocol


class AdmissionController:
    """Token bucket admission controller.

    Args:
        config: Limiter configuration (policies, whitelist, blacklist).
        logger: Structured logger for security and denial events.
        idle_ttl_seconds: Evict buckets idle for this long (from last access).
        max_entries: Registry size that triggers the oversize valve.
        clock: Monotonic time source for token refill and idle tracking.
        wall_clock: Unix time source for the X-RateLimit-Reset header.
    """

    def __init__(
        self,
        *,
        config: RateLimiterConfig,
        logger: LoggerProtocol,
        idle_ttl_seconds: float = 300.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] | None = None,
        wall_clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._clock = clock or time.monotonic
        self._wall_clock = wall_clock or time.time
        self._resolver = PolicyResolver(config=config, logger=logger)
        self._registry = LimiterRegistry(
            clock=self._clock,
            idle_ttl_seconds=idle_ttl_seconds,
            max_entries=max_entries,
        )

    @property
    def config(self) -> RateLimiterConfig:
        return self._config

    @property
    def registry(self) -> LimiterRegistry:
        return self._registry

    @property
    def bucket_count(self) -> int:
        """Number of live buckets."""
        return len(self._registry)

    # -------------------------------------------------------------------------
    # AdmissionProtocol implementation
    # -------------------------------------------------------------------------
    def admit(self, context: RequestContext) -> AdmissionDecision:
        """Decide whether a request may proceed, consuming a token if so.

        The blacklist is checked before the whitelist, so an IP present in
        both lists is blocked.

        Args:
            context: Resolved identity and target of the request.

        Returns:
            AdmissionDecision: Outcome, governing key and header values.
        """
        if context.ip in self._config.blacklist:
            self._logger.warning(
                "Blocked IP attempted access",
                ip=context.ip,
                route=context.route,
                method=context.method,
                security_event=True,
            )
            return AdmissionDecision(outcome=AdmissionOutcome.BLOCKED)

        if context.ip in self._config.whitelist:
            return AdmissionDecision(outcome=AdmissionOutcome.WHITELISTED)

        resolved = self._resolver.resolve(context)
        bucket = self._registry.get_or_create(
            resolved.key,
            rate=resolved.policy.requests_per_second,
            capacity=resolved.policy.burst,
        )
        snapshot = bucket.try_consume()

        headers = RateLimitHeaders(
            limit=resolved.policy.requests_per_second,
            remaining=max(0, math.floor(snapshot.tokens)),
            reset_at=int(self._wall_clock()) + 1,
        )

        if not snapshot.allowed:
            self._logger.warning(
                "Rate limit exceeded",
                ip=context.ip,
                route=context.route,
                method=context.method,
                user_id=str(context.user_id) if context.user_id else None,
                key=resolved.key,
                scope=resolved.scope.value,
                retry_after=round(snapshot.retry_after, 3),
            )
            return AdmissionDecision(
                outcome=AdmissionOutcome.RATE_LIMITED,
                key=resolved.key,
                headers=headers,
                retry_after=snapshot.retry_after,
            )

        return AdmissionDecision(
            outcome=AdmissionOutcome.ALLOWED,
            key=resolved.key,
            headers=headers,
        )

    def reset(self, key: str) -> Result[None, RateLimitError]:
        """Refill the live bucket for ``key`` to full capacity.

        Unlike admit(), this does not hide failure: support tooling needs to
        know whether the key it targeted actually had a bucket.

        Args:
            key: Limiter key, e.g. ``user:<uuid>``.

        Returns:
            Result[None, RateLimitError]: Success or Failure(BUCKET_NOT_FOUND).
        """
        bucket = self._registry.get(key)
        if bucket is None:
            return Failure(
                error=RateLimitError(
                    code=ErrorCode.RATE_LIMIT_BUCKET_NOT_FOUND,
                    message=f"No live rate limit bucket for key {key}",
                    details={"key": key},
                )
            )
        bucket.reset()
        self._logger.info("Rate limit reset", key=key)
        return Success(value=None)

    def sweep(self) -> int:
        """Evict idle buckets, then enforce the registry size bound.

        Returns:
            int: Total number of buckets evicted.
        """
        idle, oversize = self._registry.sweep()
        if oversize:
            self._logger.info(
                "Rate limit registry over capacity - evicted least recently used buckets",
                evicted=oversize,
                max_entries=self._registry.max_entries,
                remaining=len(self._registry),
            )
        if idle:
            self._logger.debug(
                "Rate limit registry swept idle buckets",
                evicted=idle,
                remaining=len(self._registry),
            )
        return idle + oversize
