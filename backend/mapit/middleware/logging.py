"""
MapIt Backend: Request Logging Middleware
===========================================

What:  One access-log line per HTTP request, with status and duration.
Who:   Applied to every request; runs inside RequestIDMiddleware so the
       request ID is available for correlation.

Log line:
    GET /customer/7/maps 200 12.4ms [a1b2c3d4] from 10.0.0.5

Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mapit.middleware.request_id import request_id_var

logger = logging.getLogger("mapit.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration, request ID and client IP."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        response = await call_next(request)

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
