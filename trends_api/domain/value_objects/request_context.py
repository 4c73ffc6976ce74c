"""Request context value object.

Everything the admission controller needs to know about an inbound request,
resolved by upstream collaborators (transport, router, authentication) before
admission runs. The controller reads it; it never verifies tokens or parses
headers itself.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Identity and target of one inbound request.

    Attributes:
        ip: Client IP (proxy-aware extraction is done by the transport layer).
        route: Normalized route pattern, e.g. ``/api/v1/auth/login``. Used
            verbatim as the endpoint policy lookup key.
        user_id: Authenticated user, or None for anonymous requests.
        role: Role of the authenticated user, if any.
        method: HTTP method. Only used for logging.
    """

    ip: str
    route: str
    user_id: UUID | None = None
    role: str | None = None
    method: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """True when an upstream layer resolved a user id."""
        return self.user_id is not None
