"""Admission protocol (port) for request admission control.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides the ADAPTER (AdmissionController)
- Presentation (middleware) uses the protocol

Usage:
    from trends_api.core.container import get_admission_controller

    admission: AdmissionProtocol = get_admission_controller()
    decision = admission.admit(
        RequestContext(ip="203.0.113.7", route="/api/v1/auth/login")
    )
    if not decision.allowed:
        return build_admission_error_response(decision)
"""

from typing import Protocol

from trends_api.core.result import Result
from trends_api.domain.errors import RateLimitError
from trends_api.domain.value_objects import AdmissionDecision, RequestContext


class AdmissionProtocol(Protocol):
    """Protocol for admission controllers.

    Contract:
        - admit() is synchronous and non-blocking. It never awaits I/O and
          never waits for tokens to refill.
        - admit() never raises; every call returns a decision.
        - A deny decision is authoritative; callers must not re-check.
    """

    def admit(self, context: RequestContext) -> AdmissionDecision:
        """Decide whether a request may proceed, consuming a token if so.

        Args:
            context: Resolved identity and target of the request.

        Returns:
            AdmissionDecision: Outcome plus informational header values.
        """
        ...

    def reset(self, key: str) -> Result[None, RateLimitError]:
        """Refill the live bucket for ``key`` to full capacity.

        Administrative operation (customer support unlocking a user).
        Unlike admit(), this reports failure when there is nothing to reset.

        Returns:
            Result[None, RateLimitError]: Success, or Failure with
            RATE_LIMIT_BUCKET_NOT_FOUND.
        """
        ...

    def sweep(self) -> int:
        """Evict idle buckets and enforce the registry size bound.

        Returns:
            int: Number of buckets evicted.
        """
        ...
