"""
WPVite Backend — Request ID Middleware
========================================

What:  Assigns each request a short correlation ID.
How:   Reuses the client's X-Request-ID when sent, otherwise generates one;
       stores it in a ContextVar for loggers and exception handlers and
       echoes it back in the X-Request-ID response header.
Who:   Applied to every request; read by the access log middleware and the
       exception handlers in main.py (error bodies include "request_id").
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
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
