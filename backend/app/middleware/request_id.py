"""
ExportDesk Backend: Request ID Middleware
=========================================

What:  Tags every request with a short correlation ID.
How:   Reuses the client's X-Request-ID header when it looks like an ID,
       otherwise makes a new one; stores it in a ContextVar for loggers and
       error handlers and echoes it back in the response header.
When:  Outermost application middleware, so every later log line has the ID.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up verbatim in log lines and error bodies
_CLIENT_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def pick_request_id(client_value: str | None) -> str:
    """The client's ID if it is short and printable, else a fresh 8-char hex ID."""
    if client_value and _CLIENT_ID.match(client_value):
        return client_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns and propagates the request correlation ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = pick_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
