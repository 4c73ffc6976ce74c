"""Rate limit infrastructure adapters.

Exports:
    AdmissionController: In-memory token bucket admission controller.
    LimiterRegistry: Lazily populated key -> bucket map with bounded size.
    PolicyResolver: Precedence-ordered limiter key selection.
    RegistrySweeper: Background eviction task.
    TokenBucket: Lazily refilled, thread-safe token bucket.
    get_preset: Named limiter configurations.
"""

from trends_api.infrastructure.rate_limit.admission_controller import (
    AdmissionController,
)
from trends_api.infrastructure.rate_limit.limiter_registry import LimiterRegistry
from trends_api.infrastructure.rate_limit.policy_resolver import (
    PolicyResolver,
    ResolvedLimit,
)
from trends_api.infrastructure.rate_limit.presets import get_preset
from trends_api.infrastructure.rate_limit.sweeper import RegistrySweeper
from trends_api.infrastructure.rate_limit.token_bucket import BucketSnapshot, TokenBucket

__all__ = [
    "AdmissionController",
    "BucketSnapshot",
    "LimiterRegistry",
    "PolicyResolver",
    "RegistrySweeper",
    "ResolvedLimit",
    "TokenBucket",
    "get_preset",
]
