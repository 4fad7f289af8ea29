"""
Users API — Health Check Route
===============================

What:  Health check endpoint for monitoring and load balancer probes.
Why:   A process that cannot reach MongoDB cannot serve any user request,
       so the check pings the store rather than just answering.
Who:   Called by container health checks and load balancers.

Status levels:
    - healthy:   MongoDB ping succeeded (HTTP 200)
    - unhealthy: MongoDB unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from users_api import __version__
from users_api.database import Database, get_database
from users_api.schemas.user import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    database: Database = Depends(get_database),
) -> HealthResponse:
    """Ping MongoDB and report aggregate status and uptime."""
    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
