"""Admission outcome enumeration."""

from enum import Enum


class AdmissionOutcome(str, Enum):
    """How an admission check ended.

    ALLOWED and WHITELISTED forward the request downstream. RATE_LIMITED and
    BLOCKED are terminal for the attempt and map to different HTTP statuses,
    so clients can tell "back off and retry" from "never retry".
    """

    ALLOWED = "allowed"
    """A token was consumed from the selected bucket."""

    WHITELISTED = "whitelisted"
    """Client IP is whitelisted; no bucket consulted, no headers."""

    RATE_LIMITED = "rate_limited"
    """Bucket exhausted (HTTP 429, RATE_LIMIT_EXCEEDED)."""

    BLOCKED = "blocked"
    """Client IP is blacklisted (HTTP 403, IP_BLOCKED)."""
