"""
SplitLedger Backend — Health Check Route
=========================================

What:  Liveness banner and a health endpoint for probes and load balancers.
How:   Pings the database handle attached to the app and reports uptime.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (every endpoint needs it)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from splitledger import __version__
from splitledger.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "Hello! this is expense management backend..."


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Runs `SELECT 1` against the database; cheap enough for frequent probes.
    """
    db_ok = await request.app.state.db.ping()
    if not db_ok:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
