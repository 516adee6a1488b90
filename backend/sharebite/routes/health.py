"""
ShareBite Backend — Liveness & Health Routes
==============================================

What:  GET /        liveness: the process answers (no dependency checks)
       GET /health  readiness: the listing store's database is reachable
Who:   Load balancers, Docker health checks, humans with curl.

Status levels for /health:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sharebite import __version__
from sharebite.dependencies import get_listing_store
from sharebite.schemas.common import HealthResponse, LivenessResponse
from sharebite.stores.base import ListingStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_model=LivenessResponse, summary="Liveness probe")
async def root() -> LivenessResponse:
    return LivenessResponse(
        message="ShareBite Server is Running!",
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: ListingStore = Depends(get_listing_store)):
    """
    Probe the database with the store's lightweight ping.

    ping() never raises; a False result downgrades the status to unhealthy.
    """
    db_ok = await store.ping()
    if not db_ok:
        logger.warning("Health check: database unreachable")

    body = HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if db_ok:
        return body
    return JSONResponse(status_code=503, content=body.model_dump())
