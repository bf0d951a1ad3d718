"""Core search engine functionality."""

from .engine import SearchEngine
from .fuzzy_matcher import edit_distance, similarity
from .index import IndexBuilder, IndexedRecord
from .normalizer import NormalizationOptions, TextNormalizer, normalize
from .ranking import RankingEngine
from .reading import FugashiReadingProvider, ReadingProvider, get_reading_provider
from .romaji import RomajiTransliterator, to_kana

__all__ = [
    "SearchEngine",
    "IndexBuilder",
    "IndexedRecord",
    "RankingEngine",
    "TextNormalizer",
    "NormalizationOptions",
    "RomajiTransliterator",
    "ReadingProvider",
    "FugashiReadingProvider",
    "get_reading_provider",
    "normalize",
    "to_kana",
    "similarity",
    "edit_distance",
]
