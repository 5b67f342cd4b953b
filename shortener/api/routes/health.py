"""Health check endpoints for monitoring application status."""

import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from shortener.core.config import settings
from shortener.db.base import DatabaseHealthCheck

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of the database connection"
)
async def health_check():
    """Check that the mapping store is reachable."""
    database = await DatabaseHealthCheck.check_connection()
    healthy = database["status"] == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT.value,
            "timestamp": time.time(),
            "components": {"database": database},
        },
    )
