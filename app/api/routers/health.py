"""
Health check endpoints for monitoring and orchestration.

- /health and /health/live: liveness, no dependencies
- /health/db: database connectivity
- /health/ready: readiness, reports the active storage backend
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "vehicle-rentals-api"


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        return True
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return False


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(session: AsyncSession = Depends(get_db_session)):
    if await _database_reachable(session):
        return {"status": "healthy", "component": "database"}
    return JSONResponse(
        status_code=503,
        content={
            "status": "unhealthy",
            "component": "database",
            "error": "Database connection failed",
        },
    )


@router.get("/health/ready")
async def health_check_ready(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """
    Readiness probe.

    In in-memory mode the store is always ready; the database is still probed
    so a misconfigured DATABASE_URL shows up before switching modes.
    """
    storage = "in_memory" if settings.use_in_memory else "sql"
    health_status = {"status": "ready", "storage": storage, "checks": {}}

    if await _database_reachable(session):
        health_status["checks"]["database"] = "healthy"
        return health_status

    health_status["checks"]["database"] = "unhealthy"
    if settings.use_in_memory:
        return health_status
    health_status["status"] = "not_ready"
    return JSONResponse(status_code=503, content=health_status)
