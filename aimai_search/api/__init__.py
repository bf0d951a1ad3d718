"""API endpoints for the search service."""

from .search import router as search_router
from .index import router as index_router
from .health import router as health_router
from .metrics import router as metrics_router

__all__ = [
    "search_router",
    "index_router",
    "health_router",
    "metrics_router",
]
