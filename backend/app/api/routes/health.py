"""Health endpoints: process liveness and database readiness.

GET /api/v1/health/ answers 200 while the process runs. GET /api/v1/health/ready
pings the database and answers 503 when the ping fails. The manager is looked
up on each call because init_db only runs in the lifespan.
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness: no IO."""
    return {
        "status": "healthy",
        "service": "investment-marketplace-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness: database ping."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
