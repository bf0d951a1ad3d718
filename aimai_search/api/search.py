"""Search API endpoints."""

import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import get_settings
from ..core.engine import SearchEngine
from ..core.errors import ReadingProviderError
from ..engine_instance import get_search_engine
from ..models.options import SearchOptions
from ..models.request import SearchRequest
from ..models.response import SearchResponse

router = APIRouter(prefix="/api/v1", tags=["search"])
settings = get_settings()


def _call_options(
    engine: SearchEngine,
    threshold: Optional[float],
    limit: Optional[int],
    include_score: Optional[bool],
) -> Optional[SearchOptions]:
    overrides = {
        name: value
        for name, value in (
            ("threshold", threshold),
            ("limit", limit),
            ("include_score", include_score),
        )
        if value is not None
    }
    if not overrides:
        return None
    return engine.options.model_copy(update=overrides)


async def _run_search(engine: SearchEngine, query: str, options: Optional[SearchOptions]) -> SearchResponse:
    if len(query) > settings.max_query_length:
        raise HTTPException(
            status_code=400,
            detail=f"Query too long. Maximum length is {settings.max_query_length} characters"
        )

    start_time = time.time()
    try:
        results = await engine.search(query, options)
    except ReadingProviderError as e:
        raise HTTPException(status_code=503, detail=f"Reading provider unavailable: {str(e)}")

    return SearchResponse(
        query=query,
        execution_time_ms=(time.time() - start_time) * 1000,
        total_results=len(results),
        results=results,
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search records",
    description="Fuzzy search over the indexed records; accepts Japanese script or romaji"
)
async def search_records(
    q: str = Query(..., description="The query to search for", min_length=1),
    threshold: Optional[float] = Query(
        None,
        ge=0.0,
        le=1.0,
        description="Custom score threshold (0.0-1.0)"
    ),
    limit: Optional[int] = Query(
        None,
        ge=0,
        le=1000,
        description="Maximum number of results to return"
    ),
    include_score: Optional[bool] = Query(
        None,
        description="Whether to include scores in the results"
    ),
    engine: SearchEngine = Depends(get_search_engine),
) -> SearchResponse:
    """
    Search the records matching a query.

    The first search on a freshly loaded corpus builds the index.
    """
    options = _call_options(engine, threshold, limit, include_score)
    return await _run_search(engine, q, options)


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Search with request body",
    description="Search records using a structured request body"
)
async def search_with_body(
    request: SearchRequest,
    engine: SearchEngine = Depends(get_search_engine),
) -> SearchResponse:
    """Search records using a structured request body."""
    options = _call_options(engine, request.threshold, request.limit, request.include_score)
    return await _run_search(engine, request.query, options)
