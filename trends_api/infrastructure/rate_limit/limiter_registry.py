"""Registry of live token buckets keyed by limiter key.

Buckets are created lazily on the first request for a key and evicted by a
single periodic sweep, never by per-key timers.

Locking:
    - Lookup is a plain dict read (atomic under the GIL), so hits never take
      the registry lock.
    - Creation takes the registry lock and re-checks membership before
      inserting, so concurrent first requests for one key share one bucket.
    - Eviction takes the registry lock only while deleting entries.
    - Token consumption uses each bucket's own lock, never this one.
"""

import threading
from collections.abc import Callable

from trends_api.infrastructure.rate_limit.token_bucket import TokenBucket


class LimiterRegistry:
    """Mapping of limiter key -> TokenBucket with bounded size.

    Eviction rules (applied by ``sweep``):
        1. Idle expiry: a bucket not consulted for ``idle_ttl_seconds`` is
           removed. Idle time runs from the LAST ACCESS, so a continuously
           busy key keeps its bucket (and its depleted token count).
        2. Oversize valve: if more than ``max_entries`` buckets remain, the
           least recently used ones are removed until at most
           ``max_entries // 2`` are left.

    Args:
        clock: Monotonic time source shared with the buckets.
        idle_ttl_seconds: Idle period after which a bucket is evicted.
        max_entries: Size that triggers the oversize valve.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float],
        idle_ttl_seconds: float = 300.0,
        max_entries: int = 10_000,
    ) -> None:
        self._clock = clock
        self._idle_ttl = idle_ttl_seconds
        self._max_entries = max_entries
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> TokenBucket | None:
        """Return the live bucket for ``key`` without creating one."""
        return self._buckets.get(key)

    def get_or_create(self, key: str, *, rate: float, capacity: int) -> TokenBucket:
        """Return the bucket for ``key``, creating it on first use.

        Args:
            key: Limiter key (e.g. ``user:<uuid>``).
            rate: Refill rate for a newly created bucket.
            capacity: Burst size for a newly created bucket.

        Returns:
            TokenBucket: The single bucket registered for ``key``.
        """
        bucket = self._buckets.get(key)
        if bucket is not None:
            return bucket

        with self._lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = TokenBucket(rate=rate, capacity=capacity, clock=self._clock)
                self._buckets[key] = bucket
            return bucket

    def remove(self, key: str) -> bool:
        """Drop the bucket for ``key``.

        Returns:
            bool: True if a bucket was removed.
        """
        with self._lock:
            return self._buckets.pop(key, None) is not None

    def sweep(self) -> tuple[int, int]:
        """Apply idle expiry, then the oversize valve.

        Returns:
            tuple[int, int]: (idle evictions, oversize evictions).
        """
        now = self._clock()
        with self._lock:
            idle_keys = [
                key
                for key, bucket in self._buckets.items()
                if now - bucket.last_access >= self._idle_ttl
            ]
            for key in idle_keys:
                del self._buckets[key]

            oversize = 0
            if len(self._buckets) > self._max_entries:
                target = self._max_entries // 2
                by_age = sorted(self._buckets.items(), key=lambda item: item[1].last_access)
                for key, _ in by_age[: len(self._buckets) - target]:
                    del self._buckets[key]
                    oversize += 1

        return len(idle_keys), oversize
