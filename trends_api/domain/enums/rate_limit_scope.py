"""Rate limit scope enumeration.

Each scope is one precedence level of limiter key selection. Exactly one
scope applies per request; scopes are never combined.

Precedence (highest first):
    ENDPOINT > ROLE > USER > IP
"""

from enum import Enum


class RateLimitScope(str, Enum):
    """Precedence levels for limiter key selection.

    Key Formats:
        ENDPOINT: endpoint:{route}
        ROLE: role:{role}:{user_id}
        USER: user:{user_id}
        IP: ip:{client_ip}
    """

    ENDPOINT = "endpoint"
    """Route has its own policy (login, register, upload, try-on).

    The bucket is shared by every caller of that route.
    """

    ROLE = "role"
    """Authenticated caller whose role has a policy (admin, moderator, premium)."""

    USER = "user"
    """Authenticated caller without a role policy (user default)."""

    IP = "ip"
    """Anonymous caller, limited by client address (global policy)."""

    def key_for(self, value: str) -> str:
        """Build the limiter key for this scope.

        Args:
            value: Scope-specific suffix (route, "role:user_id", user id or IP).

        Returns:
            str: Limiter key, e.g. ``ip:203.0.113.7``.
        """
        return f"{self.value}:{value}"
