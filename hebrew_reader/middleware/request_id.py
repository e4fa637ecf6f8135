"""
Hebrew Reader Backend — Request ID Middleware
=============================================

What:  Assigns a short correlation id to each request and echoes it back.
How:   Uses the client's X-Request-ID header when present, otherwise an
       8-character UUID prefix. The id is kept in a ContextVar so that
       loggers and exception handlers can read it, and in request.state
       for route handlers.

The same id appears in the `request_id` field of every error body, so a
user can quote it when reporting a failed settings save.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests share the thread but not this value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
