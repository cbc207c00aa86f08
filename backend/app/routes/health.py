"""
ExportDesk Backend: Health Check Route
======================================

What:  GET /health for container health checks and load balancer probes.
How:   Runs SELECT 1 through the engine and checks that the image storage
       root is a writable directory.

Status levels:
    - healthy:   database reachable, storage writable (HTTP 200)
    - degraded:  database reachable, storage not writable (HTTP 200); record
                 endpoints work, image uploads fail
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse
from app.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def _database_status() -> str:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return "disconnected"
    return "connected"


def _storage_status() -> str:
    root = file_service.storage_root
    if root.is_dir() and os.access(root, os.W_OK):
        return "writable"
    logger.warning("Health check: storage root %s is not writable", root)
    return "unavailable"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = await _database_status()
    storage_status = _storage_status()

    if db_status != "connected":
        overall = "unhealthy"
        response.status_code = 503
    elif storage_status != "writable":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
