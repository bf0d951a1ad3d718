"""Global search engine instance to avoid circular imports."""

from .config import get_settings
from .core.engine import SearchEngine

settings = get_settings()
_search_engine = SearchEngine(settings.search_options())


def get_search_engine() -> SearchEngine:
    """Get the process-wide search engine."""
    return _search_engine


def set_search_engine(engine: SearchEngine) -> None:
    """Replace the process-wide search engine."""
    global _search_engine
    _search_engine = engine
