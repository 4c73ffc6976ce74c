"""Domain value objects for admission control.

Immutable value objects shared by the admission controller and its callers.
"""

from trends_api.domain.value_objects.admission_decision import (
    AdmissionDecision,
    RateLimitHeaders,
)
from trends_api.domain.value_objects.rate_limit_policy import (
    RateLimiterConfig,
    RateLimitPolicy,
)
from trends_api.domain.value_objects.request_context import RequestContext

__all__ = [
    "AdmissionDecision",
    "RateLimitHeaders",
    "RateLimitPolicy",
    "RateLimiterConfig",
    "RequestContext",
]
