"""Machine-readable error codes.

Values are the exact strings placed in the ``error.code`` field of JSON error
bodies, so clients can branch on them (never retry vs. back off and retry).
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes surfaced to API clients and logs."""

    # Admission denials (client-visible)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    IP_BLOCKED = "IP_BLOCKED"

    # Admission control internals
    RATE_LIMIT_MISCONFIGURED = "RATE_LIMIT_MISCONFIGURED"
    RATE_LIMIT_BUCKET_NOT_FOUND = "RATE_LIMIT_BUCKET_NOT_FOUND"
