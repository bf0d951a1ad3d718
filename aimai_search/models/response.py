"""Response models for search results and API endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_serializer


class SearchResult(BaseModel):
    """Individual search result."""

    item: Any = Field(..., description="The matched record, as supplied by the caller")
    ref_index: int = Field(..., ge=0, description="Position of the record in the index")
    score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Similarity score (0-1)")

    @model_serializer(mode="wrap")
    def _omit_missing_score(self, handler) -> Dict[str, Any]:
        data = handler(self)
        if self.score is None:
            data.pop("score", None)
        return data


class SearchResponse(BaseModel):
    """Response for search queries."""

    query: str = Field(..., description="Original search query")
    execution_time_ms: float = Field(..., description="Query execution time in milliseconds")
    total_results: int = Field(..., description="Total number of results")
    results: List[SearchResult] = Field(..., description="Search results, best first")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")


class IndexStatusResponse(BaseModel):
    """State of the engine's index."""

    state: str = Field(..., description="empty, pending or built")
    total_records: int = Field(..., description="Number of records held by the engine")
    execution_time_ms: Optional[float] = Field(None, description="Time spent building, if a build ran")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    uptime: float = Field(..., description="Service uptime in seconds")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    dependencies: Dict[str, str] = Field(..., description="Dependency status")


class MetricsResponse(BaseModel):
    """Performance metrics response."""

    total_queries: int = Field(..., description="Total queries processed")
    empty_results: int = Field(..., description="Queries that returned nothing")
    average_response_time_ms: float = Field(..., description="Average response time")
    index_state: str = Field(..., description="empty, pending or built")
    total_records: int = Field(..., description="Number of records held by the engine")
    memory_usage_mb: float = Field(..., description="Resident memory of the process in MB")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Metrics timestamp")
