"""JSON error responses for the API.

Every error body has the same envelope so clients can branch on ``code``:

    {"success": false, "error": {"code": "RATE_LIMIT_EXCEEDED", "message": "..."}}
"""

import math

from starlette.responses import JSONResponse

from trends_api.core.enums import ErrorCode
from trends_api.domain.value_objects import AdmissionDecision


def build_error_response(
    *,
    code: ErrorCode,
    message: str,
    status_code: int,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a ``{success: false, error: {code, message}}`` response.

    Args:
        code: Machine-readable error code.
        message: Human-readable message.
        status_code: HTTP status.
        headers: Extra response headers.

    Returns:
        JSONResponse: Error response.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code.value, "message": message},
        },
        headers=headers,
    )


def build_admission_error_response(decision: AdmissionDecision) -> JSONResponse:
    """Translate a deny decision into its HTTP response.

    BLOCKED becomes 403 without rate limit headers. RATE_LIMITED becomes 429
    with the X-RateLimit-* headers and a whole-second Retry-After.

    Args:
        decision: A decision whose ``allowed`` is False.

    Returns:
        JSONResponse: 403 or 429 error response.

    Raises:
        ValueError: If the decision allows the request.
    """
    code = decision.error_code
    message = decision.error_message
    if code is None or message is None:
        raise ValueError(f"decision {decision.outcome.value} is not a denial")

    headers: dict[str, str] = {}
    if decision.headers is not None:
        headers.update(decision.headers.as_dict())
    if decision.retry_after > 0:
        headers["Retry-After"] = str(max(1, math.ceil(decision.retry_after)))

    return build_error_response(
        code=code,
        message=message,
        status_code=decision.status_code,
        headers=headers or None,
    )
