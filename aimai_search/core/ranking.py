"""Scoring, filtering and ordering of indexed records for a query."""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from ..models.options import SearchOptions
from ..models.response import SearchResult
from .fuzzy_matcher import FieldScore, field_score
from .index import IndexedRecord, canonical_form
from .normalizer import TextNormalizer
from .reading import ReadingProvider
from .romaji import RomajiTransliterator


@dataclass(frozen=True)
class NormalizedQuery:
    """Canonical forms of a query."""

    text: str
    reading: str


@dataclass(frozen=True)
class Candidate:
    """A record that passed the threshold, with its sort criteria."""

    ref_index: int
    record: IndexedRecord
    score: float
    substring: bool
    exact_original: bool

    def sort_key(self):
        return (not self.exact_original, -self.score, not self.substring, self.ref_index)


def matches_original(original: Any, raw_query: str) -> bool:
    """Whether a record, compared as a value, equals the raw query."""
    if isinstance(original, str):
        return original == raw_query
    return canonical_form(original) == raw_query


class RankingEngine:
    """Ranks an index against free-text queries."""

    def __init__(
        self,
        normalizer: Optional[TextNormalizer] = None,
        transliterator: Optional[RomajiTransliterator] = None,
    ) -> None:
        self.normalizer = normalizer or TextNormalizer()
        self.transliterator = transliterator or RomajiTransliterator()

    async def normalize_query(
        self,
        raw_query: str,
        options: SearchOptions,
        provider: ReadingProvider,
    ) -> NormalizedQuery:
        """
        Compute the canonical text and reading of a query.

        Args:
            raw_query: Query as typed
            options: Search options
            provider: Reading provider

        Returns:
            NormalizedQuery with text and reading
        """
        query_text = raw_query
        if options.use_romaji_search:
            query_text = self.transliterator.to_kana(query_text)

        normalization = options.normalization
        text = self.normalizer.normalize(query_text, normalization)
        reading = await provider.reading_of(query_text)

        return NormalizedQuery(text=text, reading=self.normalizer.normalize(reading, normalization))

    @staticmethod
    def score_record(query: NormalizedQuery, record: IndexedRecord) -> FieldScore:
        """Best of the text and reading field scores."""
        text_score = field_score(query.text, record.normalized_text)
        reading_score = field_score(query.reading, record.normalized_reading)
        # Tuples compare score first; on a tie the substring match wins
        return max(text_score, reading_score)

    async def search(
        self,
        index: Sequence[IndexedRecord],
        raw_query: str,
        options: SearchOptions,
        provider: ReadingProvider,
    ) -> List[SearchResult]:
        """
        Search an index.

        Records scoring at or above the threshold are ordered by: exact
        match of the original record against the raw query, then score,
        then substring match, then index position.

        Args:
            index: Indexed records
            raw_query: Query as typed
            options: Search options
            provider: Reading provider

        Returns:
            Ordered search results
        """
        if not raw_query or not raw_query.strip() or not index:
            return []

        query = await self.normalize_query(raw_query, options, provider)

        candidates = []
        for ref_index, record in enumerate(index):
            best = self.score_record(query, record)
            if best.score < options.threshold:
                continue
            candidates.append(
                Candidate(
                    ref_index=ref_index,
                    record=record,
                    score=best.score,
                    substring=best.substring,
                    exact_original=matches_original(record.original, raw_query),
                )
            )

        candidates.sort(key=Candidate.sort_key)

        if options.limit is not None:
            candidates = candidates[:options.limit]

        return [self._to_result(candidate, options.include_score) for candidate in candidates]

    @staticmethod
    def _to_result(candidate: Candidate, include_score: bool) -> SearchResult:
        if include_score:
            return SearchResult(
                item=candidate.record.original,
                ref_index=candidate.ref_index,
                score=candidate.score,
            )
        return SearchResult(item=candidate.record.original, ref_index=candidate.ref_index)
