"""
GCD Labs — Request ID Middleware
==================================

What:  Assigns a correlation ID to each gateway request and echoes it back.
How:   Reuses the client's X-Request-ID header or generates a short UUID,
       stores it in a ContextVar and on request.state, and sets the header on
       the response.
When:  Outermost middleware, so every later log line can read the ID.

The same ID travels on to the compute service as `x-request-id` gRPC
metadata, so one request can be followed through both services' logs:

    client (X-Request-ID: abc) → gateway [abc] → compute service [abc]
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Accepted client IDs: short, printable, safe as gRPC metadata and in log lines
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header if it is 1-64 chars of [A-Za-z0-9._-]
        2. Otherwise (absent or malformed) generate an 8-character UUID prefix
        3. Store in ContextVar (loggers, exception handlers) and request.state (routes)
        4. Add X-Request-ID to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", "")
        if not _VALID_REQUEST_ID.fullmatch(rid):
            rid = str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
