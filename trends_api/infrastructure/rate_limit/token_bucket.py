"""In-memory token bucket.

One bucket per limiter key. Refill is lazy: the token count is brought up to
date whenever the bucket is consulted, there is no ticking timer.

Algorithm:
    - Bucket starts full (capacity tokens)
    - On consult: tokens = min(capacity, tokens + elapsed * rate)
    - A request is admitted when tokens >= 1 and consumes exactly one token
    - A denied request consumes nothing
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class BucketSnapshot:
    """Bucket state observed right after a consult.

    Attributes:
        allowed: Whether the consult consumed a token.
        tokens: Fractional token count after the consult.
        retry_after: Seconds until one whole token is available
            (0 when allowed).
    """

    allowed: bool
    tokens: float
    retry_after: float


class TokenBucket:
    """Thread-safe token bucket with lazy refill.

    Token consumption is guarded by a per-bucket lock so concurrent requests
    for the same key never over-consume, while requests for unrelated keys
    never contend.

    Invariant:
        0 <= tokens <= capacity at every observation point.

    Args:
        rate: Refill rate in tokens per second (> 0).
        capacity: Maximum tokens, i.e. burst size (>= 1).
        clock: Monotonic time source in seconds.
    """

    __slots__ = ("rate", "capacity", "_clock", "_lock", "_tokens", "_last_refill", "last_access")

    def __init__(self, *, rate: float, capacity: int, clock: Callable[[], float]) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._lock = threading.Lock()
        now = clock()
        self._tokens = float(capacity)
        self._last_refill = now
        self.last_access = now

    def _refill(self, now: float) -> None:
        # Caller holds self._lock.
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(float(self.capacity), self._tokens + elapsed * self.rate)
            self._last_refill = now

    def try_consume(self) -> BucketSnapshot:
        """Consume one token if available. Never blocks waiting for refill.

        Returns:
            BucketSnapshot: Decision and resulting token count.
        """
        with self._lock:
            now = self._clock()
            self._refill(now)
            self.last_access = now
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return BucketSnapshot(allowed=True, tokens=self._tokens, retry_after=0.0)
            retry_after = (1.0 - self._tokens) / self.rate
            return BucketSnapshot(allowed=False, tokens=self._tokens, retry_after=retry_after)

    @property
    def tokens(self) -> float:
        """Current token count (refilled up to now, nothing consumed)."""
        with self._lock:
            self._refill(self._clock())
            return self._tokens

    def reset(self) -> None:
        """Refill to full capacity."""
        with self._lock:
            now = self._clock()
            self._tokens = float(self.capacity)
            self._last_refill = now
            self.last_access = now
