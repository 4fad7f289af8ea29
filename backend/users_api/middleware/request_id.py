"""
Users API — Request ID Middleware
==================================

What:  Assigns an identifier to each incoming request and echoes it back.
Why:   Error bodies and log lines carry the same ID, so a client report
       can be matched to the server-side log entry.
How:   Reuses the client's X-Request-ID header when it is a plausible
       token, otherwise generates a short UUID; stores it in a ContextVar
       and request.state.

The ID is copied verbatim into JSON error bodies and log lines, so a
client-supplied value is only accepted when it is 1-64 characters of
letters, digits, '.', '_' or '-'.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(header_value: Optional[str]) -> str:
    """Client-supplied ID if acceptable, otherwise a fresh 8-char ID."""
    if header_value and _VALID_REQUEST_ID.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var for the request and adds X-Request-ID to the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        # Not reset afterwards: the catch-all 500 handler runs outside this
        # middleware and still reads the ID.
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
