"""
Rate Limiting for the Auxia API
===============================
Implements rate limiting using slowapi (in-memory by default, Redis when
RATE_LIMIT_STORAGE_URI points at one). Limits are counted per client address.

- Every route: RATE_LIMIT_PER_MINUTE, applied by SlowAPIMiddleware
- /auth/login: 5 req/min (brute force protection)
- /auth/*/signup: 3 req/min
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from auxia.core.config import settings
from auxia.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """
    Get rate limit key.

    The limiter runs in middleware, before the auth dependency has resolved
    a principal, so every caller is keyed by address.
    """
    return f"ip:{get_remote_address(request)}"


LOGIN_LIMIT = "5/(1 minute)"
SIGNUP_LIMIT = "3/(1 minute)"


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/(1 minute)"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """JSON 429 with a Retry-After header"""
    retry_after = exc.detail.split(":")[-1].strip() if exc.detail else "60"

    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests. Please slow down.",
            "error": {
                "code": "RATE_LIMITED",
                "message": str(exc.detail),
                "details": {
                    "retry_after_seconds": int(retry_after) if retry_after.isdigit() else 60,
                },
            },
        },
        headers={
            "Retry-After": retry_after if retry_after.isdigit() else "60",
            "X-RateLimit-Limit": str(settings.RATE_LIMIT_PER_MINUTE),
        }
    )
