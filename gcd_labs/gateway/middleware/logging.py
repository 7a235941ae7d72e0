"""
GCD Labs — Request Logging Middleware
=======================================

What:  One access-log line per gateway request.
How:   Measures wall time around call_next and logs method, path, status,
       duration, request ID and client IP. Level follows the status class.
When:  Inside RequestIDMiddleware (reads the request ID it set).

What we log: method, path, status, duration, IP, request ID.
We don't log headers or query strings.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gcd_labs.gateway.middleware.request_id import request_id_var

logger = logging.getLogger("gcd_labs.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO

    /health is skipped: probes hit it every few seconds.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        try:
            response = await call_next(request)
        except Exception:
            # The catch-all handler answers 500 further out; log it here first
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "%s %s 500 %.1fms [%s] from %s",
                method,
                path,
                duration_ms,
                rid,
                client_ip,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
