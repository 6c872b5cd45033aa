"""
Auxia - HTTP Middleware
Request correlation and access logging, response hardening, body size cap.
"""

import time
from typing import Callable, Tuple
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from auxia.core.config import settings
from auxia.core.exceptions import PayloadTooLargeError, error_response
from auxia.core.logging_config import (
    logger,
    set_request_id,
    set_principal_id,
    set_role,
    generate_request_id,
)


# Probes and docs are polled constantly; they get no access log line
QUIET_PATHS: Tuple[str, ...] = ("/favicon.ico", "/docs", "/redoc", "/openapi.json")
QUIET_PREFIXES: Tuple[str, ...] = (f"/api/{settings.API_VERSION}/health",)


def is_quiet_path(path: str) -> bool:
    return path == "/" or path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One access log line per request.

    The request id (incoming X-Request-ID or a fresh one) is put in the log
    context for the whole request and echoed back with X-Response-Time.
    The principal and role are read from request.state, where the auth
    dependency leaves them.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        path = request.url.path
        started = time.perf_counter()

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - started) * 1000
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

            if not is_quiet_path(path):
                logger.log_request(
                    request.method,
                    path,
                    response.status_code,
                    duration_ms,
                    principal=getattr(request.state, "principal_id", None),
                    account_role=getattr(request.state, "role", None),
                    slow=duration_ms > settings.SLOW_REQUEST_MS,
                )
            return response

        except Exception as exc:
            logger.error(
                f"{request.method} {path} raised {type(exc).__name__}",
                exc_info=True,
                extra={"event_type": "http_request_error", "http_path": path},
            )
            raise

        finally:
            set_request_id("")
            set_principal_id("")
            set_role("")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Hardening headers; API responses (profiles, grades) are never cached"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"

        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject bodies whose declared Content-Length exceeds `max_size` with a 413"""

    def __init__(self, app: ASGIApp, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_size:
            error = PayloadTooLargeError(int(declared), self.max_size)
            logger.warning(error.message, extra={"event_type": "request_too_large", **error.details})
            return JSONResponse(status_code=error.status_code, content=error_response(error))

        return await call_next(request)


__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "RequestSizeLimitMiddleware",
    "is_quiet_path",
]
