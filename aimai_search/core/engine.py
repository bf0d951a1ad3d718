"""Main search engine implementation."""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from ..models.options import SearchOptions
from ..models.response import SearchResult
from .errors import IndexFormatError
from .index import IndexBuilder, IndexedRecord
from .normalizer import TextNormalizer
from .persistence import dump_index, is_indexed, load_json, parse_index
from .ranking import RankingEngine
from .reading import ReadingProvider, get_reading_provider
from .romaji import RomajiTransliterator
from .singleflight import SingleFlight

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EmptyState:
    """No records at all."""

    name = "empty"


@dataclass(frozen=True)
class RawPendingState:
    """Raw records waiting for the first build."""

    records: Tuple[Any, ...]
    name = "pending"


@dataclass(frozen=True)
class BuiltState:
    """A ready, read-only index."""

    index: Tuple[IndexedRecord, ...]
    name = "built"


EngineState = Union[EmptyState, RawPendingState, BuiltState]

# Options a single search may override; everything else shaped the index.
CALL_OPTION_FIELDS = ("threshold", "limit", "include_score", "use_romaji_search")
INDEX_OPTION_FIELDS = ("use_kana_normalization", "normalize_long_vowel", "expand_iteration_mark", "keys")


class SearchEngine:
    """
    Fuzzy Japanese-aware search over a record collection.

    Construct with ``from_records`` (raw records, indexed lazily on first
    search or eagerly via ``build``) or ``from_index`` (a pre-built index,
    no build needed).
    """

    def __init__(
        self,
        options: Optional[SearchOptions] = None,
        reading_provider: Optional[ReadingProvider] = None,
        normalizer: Optional[TextNormalizer] = None,
        transliterator: Optional[RomajiTransliterator] = None,
    ) -> None:
        """
        Initialize an empty search engine.

        Args:
            options: Engine options (defaults apply when None)
            reading_provider: Reading provider; falls back to options.reading_provider, then the shared default
            normalizer: Text normalizer shared by indexing and ranking
            transliterator: Romaji transliterator used on queries
        """
        self.options = options or SearchOptions()
        self.reading_provider: ReadingProvider = (
            reading_provider or self.options.reading_provider or get_reading_provider()
        )
        self.normalizer = normalizer or TextNormalizer()
        self.index_builder = IndexBuilder(self.normalizer)
        self.ranking_engine = RankingEngine(self.normalizer, transliterator)

        self._state: EngineState = EmptyState()
        self._build_flight: SingleFlight[None] = SingleFlight()

        self._stats = {
            "total_queries": 0,
            "empty_results": 0,
            "total_execution_time": 0.0,
            "builds": 0,
            "last_build_time_ms": None,
        }

    @classmethod
    def from_records(
        cls,
        records: Iterable[Any],
        options: Optional[SearchOptions] = None,
        reading_provider: Optional[ReadingProvider] = None,
        **kwargs: Any,
    ) -> "SearchEngine":
        """Create an engine over raw records; the index is built on demand."""
        engine = cls(options, reading_provider, **kwargs)
        records = tuple(records)
        if records:
            engine._state = RawPendingState(records)
        return engine

    @classmethod
    def from_index(
        cls,
        index: Any,
        options: Optional[SearchOptions] = None,
        reading_provider: Optional[ReadingProvider] = None,
        **kwargs: Any,
    ) -> "SearchEngine":
        """
        Create an engine over a pre-built index.

        A malformed index does not raise: the engine starts with an empty
        index and a warning is logged.
        """
        engine = cls(options, reading_provider, **kwargs)
        try:
            parsed = parse_index(index)
        except IndexFormatError as e:
            logger.warning("Ignoring malformed pre-built index", error=str(e))
            return engine

        if parsed:
            engine._state = BuiltState(tuple(parsed))
        return engine

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        options: Optional[SearchOptions] = None,
        reading_provider: Optional[ReadingProvider] = None,
        **kwargs: Any,
    ) -> "SearchEngine":
        """Create an engine from a JSON file holding either raw records or an index."""
        data = load_json(path)
        if is_indexed(data):
            logger.info("Loading pre-built index", path=str(path), total_records=len(data))
            return cls.from_index(data, options, reading_provider, **kwargs)

        if not isinstance(data, list):
            logger.warning("Ignoring data file that is not a JSON array", path=str(path))
            return cls(options, reading_provider, **kwargs)

        logger.info("Loading raw records", path=str(path), total_records=len(data))
        return cls.from_records(data, options, reading_provider, **kwargs)

    @property
    def state(self) -> str:
        return self._state.name

    @property
    def is_built(self) -> bool:
        return isinstance(self._state, BuiltState)

    def __len__(self) -> int:
        if isinstance(self._state, BuiltState):
            return len(self._state.index)
        if isinstance(self._state, RawPendingState):
            return len(self._state.records)
        return 0

    async def build(self) -> None:
        """
        Build the index if raw records are pending.

        Concurrent callers share one build. A failed build leaves the
        records pending, so a later call can retry.
        """
        if not isinstance(self._state, RawPendingState):
            return
        await self._build_flight.run(self._build_pending)

    async def _build_pending(self) -> None:
        state = self._state
        if not isinstance(state, RawPendingState):
            return

        start_time = time.time()
        index = await self.index_builder.build(state.records, self.options, self.reading_provider)

        # A reindex that finished in the meantime wins
        if self._state is state:
            self._state = BuiltState(tuple(index))
        self._record_build(start_time)

    async def reindex(self, records: Iterable[Any]) -> None:
        """
        Replace the index with one built from new records.

        The new index is built completely before it replaces the current
        state; on failure the current state is kept.
        """
        records = tuple(records)
        start_time = time.time()
        index = await self.index_builder.build(records, self.options, self.reading_provider)
        self._state = BuiltState(tuple(index)) if index else EmptyState()
        self._record_build(start_time)

    def _record_build(self, start_time: float) -> None:
        self._stats["builds"] += 1
        self._stats["last_build_time_ms"] = round((time.time() - start_time) * 1000, 2)

    async def get_index(self) -> Sequence[IndexedRecord]:
        """The built index, building it first if needed."""
        if isinstance(self._state, RawPendingState):
            logger.info("Building index on first use", total_records=len(self._state.records))
            await self.build()
        if isinstance(self._state, BuiltState):
            return self._state.index
        return ()

    async def export_index(self) -> List[Dict[str, Any]]:
        """The index in its serialized form."""
        return dump_index(await self.get_index())

    async def search(self, query: str, options: Optional[SearchOptions] = None) -> List[SearchResult]:
        """
        Search for records matching a query.

        Args:
            query: Free-text query, in Japanese script or romaji
            options: Overrides for this call only. Only threshold, limit,
                include_score and use_romaji_search are taken from it; the
                rest must match the engine's own options.

        Returns:
            Ordered list of SearchResult

        Raises:
            ValueError: If options change a setting the index was built with
        """
        call_options = self._call_options(options)
        start_time = time.time()
        self._stats["total_queries"] += 1

        if not query or not query.strip():
            results: List[SearchResult] = []
        else:
            index = await self.get_index()
            results = await self.ranking_engine.search(
                index, query, call_options, self.reading_provider
            )

        if not results:
            self._stats["empty_results"] += 1
        self._stats["total_execution_time"] += (time.time() - start_time) * 1000

        return results

    def _call_options(self, options: Optional[SearchOptions]) -> SearchOptions:
        if options is None:
            return self.options

        for name in INDEX_OPTION_FIELDS:
            if getattr(options, name) != getattr(self.options, name):
                raise ValueError(f"Option '{name}' is fixed by the index and cannot change per search")

        provider = options.reading_provider
        if provider is not None and provider not in (self.reading_provider, self.options.reading_provider):
            raise ValueError("The reading provider is fixed by the index and cannot change per search")

        return self.options.model_copy(update={name: getattr(options, name) for name in CALL_OPTION_FIELDS})

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        stats = self._stats.copy()

        if stats["total_queries"] > 0:
            stats["average_execution_time_ms"] = stats["total_execution_time"] / stats["total_queries"]
        else:
            stats["average_execution_time_ms"] = 0.0

        stats["index_state"] = self.state
        stats["total_records"] = len(self)
        return stats
