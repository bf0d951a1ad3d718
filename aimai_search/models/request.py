"""Request models for API endpoints."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class SearchRequest(BaseModel):
    """Request model for search queries."""

    query: str = Field(..., min_length=1, max_length=100, description="Search query")
    threshold: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Custom score threshold"
    )
    limit: Optional[int] = Field(
        None, ge=0, le=1000, description="Maximum number of results to return"
    )
    include_score: Optional[bool] = Field(
        None, description="Whether to include scores in the results"
    )

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Reject whitespace-only queries."""
        if not v.strip():
            raise ValueError("Query cannot be empty")
        return v


class ReindexRequest(BaseModel):
    """Request model for replacing the indexed records."""

    records: List[Any] = Field(..., description="Raw records (strings or objects)")
