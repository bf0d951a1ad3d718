"""Metrics and monitoring API endpoints."""

import psutil
from fastapi import APIRouter, Depends, HTTPException

from ..core.engine import SearchEngine
from ..engine_instance import get_search_engine
from ..models.response import MetricsResponse

router = APIRouter(prefix="/api/v1", tags=["metrics"])


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    summary="Get performance metrics",
    description="Get query statistics, index state and process memory usage"
)
async def get_metrics(engine: SearchEngine = Depends(get_search_engine)) -> MetricsResponse:
    """Get performance metrics for the search engine."""
    try:
        stats = engine.get_stats()

        memory_usage_mb = psutil.Process().memory_info().rss / (1024 * 1024)

        return MetricsResponse(
            total_queries=stats["total_queries"],
            empty_results=stats["empty_results"],
            average_response_time_ms=stats["average_execution_time_ms"],
            index_state=stats["index_state"],
            total_records=stats["total_records"],
            memory_usage_mb=memory_usage_mb
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to get metrics: {str(e)}"
        )
