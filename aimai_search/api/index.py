"""Index management API endpoints."""

import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..core.engine import SearchEngine
from ..core.errors import AimaiError, ReadingProviderError
from ..engine_instance import get_search_engine
from ..models.request import ReindexRequest
from ..models.response import IndexStatusResponse

router = APIRouter(prefix="/api/v1", tags=["index"])


def _status(engine: SearchEngine, start_time: Optional[float] = None) -> IndexStatusResponse:
    return IndexStatusResponse(
        state=engine.state,
        total_records=len(engine),
        execution_time_ms=(time.time() - start_time) * 1000 if start_time else None,
    )


def _build_failed(e: AimaiError) -> HTTPException:
    status_code = 503 if isinstance(e, ReadingProviderError) else 500
    return HTTPException(status_code=status_code, detail=f"Index build failed: {str(e)}")


@router.get(
    "/index/status",
    response_model=IndexStatusResponse,
    summary="Index status",
    description="Get the state of the index without building it"
)
async def index_status(engine: SearchEngine = Depends(get_search_engine)) -> IndexStatusResponse:
    return _status(engine)


@router.post(
    "/index/build",
    response_model=IndexStatusResponse,
    summary="Build the index",
    description="Build the index now instead of on the first search; does nothing if already built"
)
async def build_index(engine: SearchEngine = Depends(get_search_engine)) -> IndexStatusResponse:
    start_time = time.time()
    try:
        await engine.build()
    except AimaiError as e:
        raise _build_failed(e)
    return _status(engine, start_time)


@router.get(
    "/index",
    response_model=List[Dict[str, Any]],
    summary="Export the index",
    description="Get the index as a list of {original, normalizedText, normalizedReading} entries"
)
async def export_index(engine: SearchEngine = Depends(get_search_engine)) -> List[Dict[str, Any]]:
    """
    Export the index in its persistence format.

    The output can be saved and later loaded to skip the build step.
    """
    try:
        return await engine.export_index()
    except AimaiError as e:
        raise _build_failed(e)


@router.put(
    "/records",
    response_model=IndexStatusResponse,
    summary="Replace records",
    description="Index a new record list and swap it in once fully built"
)
async def replace_records(
    request: ReindexRequest,
    engine: SearchEngine = Depends(get_search_engine),
) -> IndexStatusResponse:
    """
    Re-index the engine with a new record list.

    The current index keeps serving until the new one is complete.
    """
    start_time = time.time()
    try:
        await engine.reindex(request.records)
    except AimaiError as e:
        raise _build_failed(e)
    return _status(engine, start_time)
