"""Health check and monitoring API endpoints."""

import time
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..core.engine import SearchEngine
from ..engine_instance import get_search_engine
from ..models.response import HealthResponse

router = APIRouter(prefix="/api/v1", tags=["health"])
settings = get_settings()

# Track application start time
app_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the search service"
)
async def health_check(engine: SearchEngine = Depends(get_search_engine)) -> HealthResponse:
    """
    Perform a health check on the search service.

    The index is reported as pending until the first search or an explicit
    build. The reading provider is reported as pending until it has loaded.
    """
    try:
        uptime = time.time() - app_start_time

        dependencies = {
            "search_engine": "healthy",
            "index": "healthy" if engine.state != "pending" else "pending",
        }

        provider_ready = getattr(engine.reading_provider, "is_ready", True)
        dependencies["reading_provider"] = "healthy" if provider_ready else "pending"

        if all(status == "healthy" for status in dependencies.values()):
            status = "healthy"
        else:
            status = "degraded"

        return HealthResponse(
            status=status,
            version=settings.app_version,
            uptime=uptime,
            dependencies=dependencies
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Health check failed: {str(e)}"
        )


@router.get(
    "/health/ready",
    summary="Readiness check",
    description="Check if the service is ready to accept requests"
)
async def readiness_check(engine: SearchEngine = Depends(get_search_engine)) -> JSONResponse:
    """
    Check if the service is ready to accept requests.

    Ready means searches will not pay for the index build.
    """
    stats = engine.get_stats()
    ready = engine.state != "pending"

    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.utcnow().isoformat(),
            "index_state": stats["index_state"],
            "total_records": stats["total_records"],
        }
    )


@router.get(
    "/health/live",
    summary="Liveness check",
    description="Check if the service is alive and responding"
)
async def liveness_check() -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "alive",
            "timestamp": datetime.utcnow().isoformat(),
            "uptime": time.time() - app_start_time
        }
    )
