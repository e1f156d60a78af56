"""
Blog API Backend — Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the document store and reports aggregate status.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   store answers ping (HTTP 200)
    - unhealthy: store unreachable or not configured (HTTP 503)
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Request, Response, status

from blogapi import __version__
from blogapi.schemas.post import HealthResponse
from blogapi.store.base import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Probe the document store with a ping and report the result."""
    store: Optional[DocumentStore] = getattr(request.app.state, "document_store", None)
    db_status = "connected"
    overall = "healthy"
    detail = None

    if store is None:
        db_status, overall, detail = "disconnected", "unhealthy", "store not configured"
    elif not await store.ping():
        db_status, overall, detail = "disconnected", "unhealthy", "store did not answer ping"
        logger.warning("Health check: document store unreachable")

    if overall != "healthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
        detail=detail,
    )
