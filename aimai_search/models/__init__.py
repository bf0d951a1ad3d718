"""Data models for the search engine."""

from .options import SearchOptions
from .response import (
    SearchResult,
    SearchResponse,
    IndexStatusResponse,
    ErrorResponse,
    HealthResponse,
    MetricsResponse,
)
from .request import SearchRequest, ReindexRequest

__all__ = [
    "SearchOptions",
    "SearchResult",
    "SearchResponse",
    "IndexStatusResponse",
    "ErrorResponse",
    "HealthResponse",
    "MetricsResponse",
    "SearchRequest",
    "ReindexRequest",
]
