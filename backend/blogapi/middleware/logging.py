"""
Blog API Backend — Access Log Middleware
==========================================

What:  One access log line per request, keyed by the post operation it hit.
How:   After call_next() the router has stored the matched APIRoute in the
       ASGI scope; its template (/api/posts/{post_id}) and endpoint name
       (update_post) are logged instead of the raw URL, so lines group per
       operation. The post id, when present, goes into its own field.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Example line:
    PUT /api/posts/{post_id} (update_post) 404 1.8ms [a1b2c3d4] post=65f1c0ffee0ddba11ca7b0b5

Log levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Not logged: request bodies, Authorization headers, health probes.
"""

import logging
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blogapi.middleware.request_id import request_id_var

logger = logging.getLogger("blogapi.access")

# Endpoint names whose requests are not logged
SILENT_OPERATIONS = {"health_check"}


def _matched_route(request: Request) -> Tuple[str, Optional[str]]:
    """(template, endpoint name) of the route that served the request, or the raw path."""
    route = request.scope.get("route")
    if route is None:
        return request.url.path, None
    return route.path, route.name


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with the post operation, status and timing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        template, operation = _matched_route(request)
        if operation in SILENT_OPERATIONS:
            return response

        post_id = request.scope.get("path_params", {}).get("post_id")
        rid = request_id_var.get("")

        logger.log(
            _level_for(response.status_code),
            "%s %s (%s) %d %.1fms [%s]%s",
            request.method,
            template,
            operation or "unrouted",
            response.status_code,
            elapsed_ms,
            rid,
            f" post={post_id}" if post_id else "",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": template,
                "operation": operation,
                "post_id": post_id,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
