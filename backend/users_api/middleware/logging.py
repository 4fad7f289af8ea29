"""
Users API — Request Logging Middleware
=======================================

What:  One log line per HTTP request: method, path, status, duration.
Why:   The only per-request observability the service has.
How:   Times the downstream call and picks the log level from the status.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Level by status:
    5xx              → ERROR   (store failure on get/delete, unexpected error)
    404              → INFO    (a missing user is a normal lookup outcome)
    other 4xx        → WARNING (bad body, rejected write)
    everything else  → INFO

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, IP, request ID
    ❌ Don't log: request bodies (user documents may contain PII)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from users_api.middleware.request_id import request_id_var

logger = logging.getLogger("users_api.access")

# Probes and docs assets; logging them drowns out user traffic.
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 and status != 404:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request once its response status is known."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for_status(response.status_code),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] from %(client_ip)s",
            fields,
            extra=fields,
        )
        return response
