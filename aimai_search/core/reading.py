"""Phonetic readings of Japanese text via a morphological analyzer."""

import asyncio
from functools import lru_cache
from typing import Any, Callable, Optional, Protocol, runtime_checkable

import jaconv
import structlog

from .errors import ReadingProviderError
from .singleflight import SingleFlight

logger = structlog.get_logger(__name__)


@runtime_checkable
class ReadingProvider(Protocol):
    """Anything that can return the kana reading of a text."""

    async def reading_of(self, text: str) -> str:
        ...


def _default_tagger_factory() -> Any:
    from fugashi import Tagger

    return Tagger()


class FugashiReadingProvider:
    """
    Reading provider backed by MeCab through fugashi and unidic-lite.

    The tagger is expensive to load, so it is created once on first use.
    Concurrent first callers share a single initialization attempt and all
    observe its outcome; a failed attempt is not remembered, so a later
    call may try again.
    """

    def __init__(self, tagger_factory: Optional[Callable[[], Any]] = None) -> None:
        self._tagger_factory = tagger_factory or _default_tagger_factory
        self._tagger: Any = None
        self._init_flight: SingleFlight[Any] = SingleFlight()

    @property
    def init_attempts(self) -> int:
        return self._init_flight.flights

    @property
    def is_ready(self) -> bool:
        return self._tagger is not None

    async def _load_tagger(self) -> Any:
        if self._tagger is not None:
            return self._tagger

        logger.info("Loading morphological analyzer")
        try:
            tagger = await asyncio.to_thread(self._tagger_factory)
        except Exception as e:
            logger.error("Failed to load morphological analyzer", error=str(e))
            raise ReadingProviderError(f"Reading provider initialization failed: {e}") from e

        self._tagger = tagger
        logger.info("Morphological analyzer ready")
        return tagger

    async def get_tagger(self) -> Any:
        if self._tagger is not None:
            return self._tagger
        return await self._init_flight.run(self._load_tagger)

    async def reading_of(self, text: str) -> str:
        """
        Get the hiragana reading of a text.

        Each token contributes its dictionary reading, or its surface form
        when the dictionary has none.

        Args:
            text: Japanese text

        Returns:
            Lower-cased hiragana reading
        """
        if not text:
            return ""

        tagger = await self.get_tagger()
        parts = []
        for token in tagger(text):
            reading = getattr(token.feature, "kana", None)
            if not reading or reading == "*":
                reading = token.surface
            parts.append(jaconv.kata2hira(reading))

        return "".join(parts).lower()


@lru_cache()
def get_reading_provider() -> FugashiReadingProvider:
    """Get the shared default reading provider."""
    return FugashiReadingProvider()
