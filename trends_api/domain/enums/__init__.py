"""Domain enums for admission control.

Available Enums:
    - RateLimitScope: Which precedence level selected a limiter key
    - AdmissionOutcome: Result category of an admission check
    - RateLimitPreset: Named limiter configurations loaded at startup
"""

from trends_api.domain.enums.admission_outcome import AdmissionOutcome
from trends_api.domain.enums.rate_limit_preset import RateLimitPreset
from trends_api.domain.enums.rate_limit_scope import RateLimitScope

__all__ = [
    "AdmissionOutcome",
    "RateLimitPreset",
    "RateLimitScope",
]
