"""Admission control middleware for FastAPI.

Runs every inbound request through the admission controller before it
reaches a route handler:
- HTTP 403 ``IP_BLOCKED`` for blacklisted client IPs
- HTTP 429 ``RATE_LIMIT_EXCEEDED`` when the selected bucket is empty
- X-RateLimit-* headers on admitted (non-whitelisted) responses
- Fail-open: if admission itself errors, the request is forwarded

Identity is NOT verified here. An upstream authentication layer places the
resolved ``user_id`` and ``role`` on ``request.state``; this middleware only
reads them.

Usage:
    from trends_api.presentation.middleware import AdmissionMiddleware

    app.add_middleware(AdmissionMiddleware)
"""

from typing import TYPE_CHECKING, Awaitable, Callable
from uuid import UUID

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match
from starlette.types import ASGIApp

from trends_api.domain.value_objects import RequestContext
from trends_api.presentation.errors import build_admission_error_response

if TYPE_CHECKING:
    from trends_api.domain.protocols import AdmissionProtocol, LoggerProtocol

SKIP_PATHS = ("/", "/health")
SKIP_PREFIXES = ("/docs", "/redoc", "/openapi.json", "/favicon.ico")


class AdmissionMiddleware(BaseHTTPMiddleware):
    """Starlette middleware gating requests through AdmissionProtocol.

    Attributes:
        _admission: AdmissionProtocol implementation (lazy loaded from container).
        _logger: LoggerProtocol for structured logging (lazy loaded).
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        admission: "AdmissionProtocol | None" = None,
        logger: "LoggerProtocol | None" = None,
        enabled: bool = True,
    ) -> None:
        """Initialize admission middleware.

        Args:
            app: The ASGI application to wrap.
            admission: Controller to use; defaults to the container singleton.
            logger: Logger to use; defaults to the container singleton.
            enabled: When False every request is forwarded untouched.
        """
        super().__init__(app)
        self._admission = admission
        self._logger = logger
        self._enabled = enabled

    def _get_admission(self) -> "AdmissionProtocol":
        if self._admission is None:
            from trends_api.core.container import get_admission_controller

            self._admission = get_admission_controller()
        return self._admission

    def _get_logger(self) -> "LoggerProtocol":
        if self._logger is None:
            from trends_api.core.container import get_logger

            self._logger = get_logger()
        return self._logger

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Admit or reject the request.

        Args:
            request: Incoming HTTP request.
            call_next: Next handler in middleware chain.

        Returns:
            Response: 403/429 error response or the downstream response.
        """
        path = request.url.path
        if not self._enabled or self._should_skip(path):
            return await call_next(request)

        try:
            context = self._build_context(request)
            decision = self._get_admission().admit(context)
        except Exception as exc:
            self._get_logger().warning(
                "Admission control fail-open",
                path=path,
                method=request.method,
                error_type=type(exc).__name__,
                error_message=str(exc),
                result="fail_open",
            )
            return await call_next(request)

        if not decision.allowed:
            return build_admission_error_response(decision)

        response = await call_next(request)
        if decision.headers is not None:
            response.headers.update(decision.headers.as_dict())
        return response

    def _should_skip(self, path: str) -> bool:
        """Health checks and API docs bypass admission control."""
        return path in SKIP_PATHS or path.startswith(SKIP_PREFIXES)

    def _build_context(self, request: Request) -> RequestContext:
        return RequestContext(
            ip=self._get_client_ip(request),
            route=self._get_route_pattern(request),
            user_id=self._get_user_id(request),
            role=getattr(request.state, "role", None),
            method=request.method,
        )

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request.

        Takes the first X-Forwarded-For entry (client, rest is the proxy
        chain), then X-Real-IP, then the socket peer.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        if request.client:
            return request.client.host

        return "unknown"

    def _get_route_pattern(self, request: Request) -> str:
        """Return the matched route template (``/api/v1/posts/{post_id}``).

        Falls back to the raw path when no route matches, so unknown paths
        are still limited by identity.
        """
        router = getattr(request.app, "router", None)
        partial: str | None = None
        for route in getattr(router, "routes", ()):
            match, _ = route.matches(request.scope)
            if match == Match.FULL:
                return getattr(route, "path", request.url.path)
            if match == Match.PARTIAL and partial is None:
                partial = getattr(route, "path", None)
        return partial or request.url.path

    def _get_user_id(self, request: Request) -> UUID | None:
        """Read the user id resolved by the authentication layer."""
        raw = getattr(request.state, "user_id", None)
        if raw is None or isinstance(raw, UUID):
            return raw
        try:
            return UUID(str(raw))
        except ValueError:
            self._get_logger().debug(
                "Ignoring malformed user_id on request state",
                path=request.url.path,
            )
            return None
