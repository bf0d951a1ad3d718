"""Shared fixtures for the test suite."""

import asyncio
from typing import Dict, Optional

import jaconv
import pytest

from aimai_search.core.errors import ReadingProviderError


READINGS = {
    "東京": "トウキョウ",
    "京都": "キョウト",
    "大阪": "オオサカ",
    "人々": "ヒトビト",
    "太宰治": "ダザイオサム",
    "走れメロス": "ハシレメロス",
    "人間失格": "ニンゲンシッカク",
    "夏目漱石": "ナツメソウセキ",
}


class FakeReadingProvider:
    """In-memory reading provider: whitespace-separated words looked up in a table."""

    def __init__(
        self,
        readings: Optional[Dict[str, str]] = None,
        fail_on: Optional[str] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.readings = READINGS if readings is None else readings
        self.fail_on = fail_on
        self.error = error or ReadingProviderError("dictionary failed to load")
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def reading_of(self, text: str) -> str:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.fail_on is not None and self.fail_on in text:
                raise self.error
            words = text.split()
            return "".join(jaconv.kata2hira(self.readings.get(word, word)) for word in words)
        finally:
            self.in_flight -= 1


@pytest.fixture
def reading_provider():
    """Deterministic reading provider."""
    return FakeReadingProvider()


@pytest.fixture
def tokyo_corpus():
    """Script variants of Tokyo plus Kyoto."""
    return ["東京", "とうきょう", "トウキョウ", "京都"]


@pytest.fixture
def books():
    """Structured records."""
    return [
        {"title": "走れメロス", "author": "太宰治"},
        {"title": "人間失格", "author": "太宰治"},
        {"title": "こころ", "author": "夏目漱石"},
    ]
