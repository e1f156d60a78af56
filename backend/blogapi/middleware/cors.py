"""
Blog API Backend — CORS Middleware
====================================

What:  Adds permissive cross-origin headers to every response and answers
       every OPTIONS request with an empty 204 before routing.
How:   Starlette BaseHTTPMiddleware; OPTIONS never reaches call_next().
       Unhandled errors from the routes are answered here as a 500 so the
       response still carries the CORS headers.
Who:   Applied to every request; registered in blogapi.main.create_app().

Headers sent on every response:
    Access-Control-Allow-Origin:  settings.cors_allow_origin (default "*")
    Access-Control-Allow-Methods: GET, POST, PUT, DELETE, OPTIONS
    Access-Control-Allow-Headers: Content-Type, Authorization

Starlette's own CORSMiddleware answers only true preflights (Origin plus
Access-Control-Request-Method) and with 200, so the filter is written here.
"""

import logging
from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"

logger = logging.getLogger(__name__)


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Cross-origin filter ahead of route dispatch.

    Behavior:
        1. OPTIONS (any path): return 204 with CORS headers and no body
        2. Anything else: run the request, then add CORS headers to the
           response, including error responses from the exception handlers
        3. An exception no handler mapped: 500 {"error": "Internal server error"}
           with CORS headers
    """

    def __init__(self, app: ASGIApp, allow_origin: str = "*"):
        super().__init__(app)
        self.allow_origin = allow_origin

    @property
    def cors_headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=self.cors_headers)

        try:
            response = await call_next(request)
        except Exception as e:
            # The app-level Exception handler runs outside this middleware
            logger.error(
                "Unhandled error on %s %s: %s",
                request.method,
                request.url.path,
                e,
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
                headers=self.cors_headers,
            )

        response.headers.update(self.cors_headers)
        return response
