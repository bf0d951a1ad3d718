"""
Aimai Search - fuzzy, Japanese-aware search over records.

Ranks strings or structured records against free-text queries, including
romaji queries, tolerating katakana/hiragana differences, long vowel
spelling drift and iteration mark shorthand.
"""

__version__ = "1.0.0"

from .core.engine import SearchEngine
from .core.index import IndexedRecord
from .models.options import SearchOptions
from .models.response import SearchResult

__all__ = [
    "SearchEngine",
    "SearchOptions",
    "SearchResult",
    "IndexedRecord",
]
