"""Rate limiting configuration using slowapi.

Security: Coarse per-IP guard against code-request flooding and online
code guessing. Storage is in-memory, so limits apply per instance; the
protocol itself keeps no state, and the advisory cooldown returned by
request-code is not enforced here.

Usage in routers:
    from codepass.core.rate_limiting import limiter

    @router.post("/request-code")
    @limiter.limit(lambda: settings.rate_limit_request_code)
    async def request_code(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from codepass.core.config import settings

# Global limiter instance
# Keyed by client IP; sessions are bearer tokens in the body, so there is no
# cheap authenticated identity to key on before validation.
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Security: Returns 429 Too Many Requests with standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # Parse retry-after from exception detail (e.g., "10 per 1 minute")
    # Fallback to 60 seconds if parsing fails
    try:
        retry_after = str(exc.detail.split()[-1])
        # Validate it looks like a time value
        int(retry_after.rstrip("s"))  # "60" or "60s" -> 60
    except (ValueError, AttributeError, IndexError):
        retry_after = "60"

    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMITED",
                "message": f"Rate limit exceeded: {exc.detail}",
                "details": None,
            }
        },
        headers={"Retry-After": retry_after},
    )
