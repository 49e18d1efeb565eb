"""
Blog API — Request ID Middleware
=================================

What:  Tags each request with a correlation ID and echoes it back in X-Request-ID.
How:   Uses the client's X-Request-ID when present, otherwise a short random ID;
       stores it in a ContextVar so loggers, error bodies and the access log
       can read it without passing it around.
When:  Runs before the logging middleware, so the access log line carries the ID.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns `request.state.request_id` and the X-Request-ID response header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(HEADER) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[HEADER] = rid
        return response
