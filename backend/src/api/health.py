"""
Health check endpoints for monitoring.

Provides health status for load balancers, monitoring systems,
and container orchestration health probes.

Endpoints:
- /health, /api/health: Health check including database round-trip
- /health/live: Simple alive check
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.database import get_db
from ..schemas.common import HealthResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

SLOW_DATABASE_MS = 100


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the API and its database.",
)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Health check endpoint for monitoring systems.

    Checks:
    - API is responding
    - Database connection is healthy
    - Database response time

    Returns:
        HealthResponse with status and component health
    """
    db_status = "connected"

    try:
        start = time.time()
        db.execute(text("SELECT 1"))
        db_response_time_ms = int((time.time() - start) * 1000)

        if db_response_time_ms > SLOW_DATABASE_MS:
            logger.warning(f"Slow database response: {db_response_time_ms}ms")
    except Exception as e:
        db_status = "disconnected"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        database=db_status,
        environment=settings.environment,
    )


@router.get(
    "/health/live",
    summary="Liveness Check",
    description="Simple liveness check to verify the API is running.",
)
async def liveness_check() -> dict:
    """
    Liveness probe for container orchestration.

    Does NOT check dependencies - use /health for that.
    """
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
