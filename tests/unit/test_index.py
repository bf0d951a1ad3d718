"""Unit tests for index construction."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from aimai_search.core.errors import IndexBuildError, ReadingProviderError
from aimai_search.core.index import (
    IndexBuilder,
    IndexedRecord,
    canonical_form,
    extract_text,
    resolve_key,
)
from aimai_search.models.options import SearchOptions
from tests.conftest import FakeReadingProvider


@dataclass
class Book:
    title: str
    pages: int


class Author(BaseModel):
    name: str
    born: int


class TestExtractText:
    """Test cases for searchable text extraction."""

    def test_string_record(self):
        """Test strings are used as they are."""
        assert extract_text("東京") == "東京"

    def test_keys_in_configured_order(self, books):
        """Test configured keys are joined with spaces in order."""
        assert extract_text(books[0], ["author", "title"]) == "太宰治 走れメロス"

    def test_all_string_fields_without_keys(self):
        """Test every string field is used when no keys are configured."""
        record = {"title": "こころ", "year": 1914, "author": "夏目漱石"}
        assert extract_text(record) == "こころ 夏目漱石"

    def test_missing_and_non_string_keys_skipped(self):
        """Test absent or non-string values are left out."""
        record = {"title": "こころ", "year": 1914}
        assert extract_text(record, ["year", "title", "missing"]) == "こころ"

    def test_dotted_key(self):
        """Test dotted selectors walk into nested records."""
        record = {"book": {"author": {"name": "太宰治"}}}
        assert resolve_key(record, "book.author.name") == "太宰治"
        assert extract_text(record, ["book.author.name"]) == "太宰治"
        assert resolve_key(record, "book.missing.name") is None

    def test_dataclass_record(self):
        """Test dataclass fields are enumerated."""
        assert extract_text(Book("人間失格", 160)) == "人間失格"

    def test_pydantic_record(self):
        """Test pydantic model fields are enumerated."""
        assert extract_text(Author(name="太宰治", born=1909)) == "太宰治"
        assert extract_text(Author(name="太宰治", born=1909), ["name"]) == "太宰治"

    def test_empty_record(self):
        """Test records without text produce an empty string."""
        assert extract_text({}) == ""
        assert extract_text(None) == ""


class TestCanonicalForm:
    """Test cases for the canonical record serialization."""

    def test_key_order_independent(self):
        """Test field declaration order does not matter."""
        assert canonical_form({"a": 1, "b": "x"}) == canonical_form({"b": "x", "a": 1})

    def test_string_is_itself(self):
        """Test string records are not quoted."""
        assert canonical_form("東京") == "東京"

    def test_non_ascii_kept(self):
        """Test Japanese text is serialized unescaped."""
        assert canonical_form({"title": "こころ"}) == '{"title":"こころ"}'

    def test_dataclass(self):
        """Test dataclass records serialize like dicts."""
        assert canonical_form(Book("こころ", 1)) == canonical_form({"title": "こころ", "pages": 1})


class TestIndexBuilder:
    """Test cases for the IndexBuilder class."""

    @pytest.fixture
    def builder(self):
        """Create an index builder."""
        return IndexBuilder()

    @pytest.mark.asyncio
    async def test_build_record(self, builder, reading_provider):
        """Test one record gets normalized text and reading."""
        record = await builder.build_record("東京", SearchOptions(), reading_provider)

        assert record == IndexedRecord("東京", "東京", "とうきょう")

    @pytest.mark.asyncio
    async def test_build_keeps_every_record(self, builder, reading_provider):
        """Test records with no text are still indexed, in order."""
        records = ["トウキョウ", {}, {"title": "データ"}]
        index = await builder.build(records, SearchOptions(), reading_provider)

        assert len(index) == 3
        assert [entry.original for entry in index] == records
        assert index[0].normalized_text == "とうきょう"
        assert index[1].normalized_text == ""
        assert index[1].normalized_reading == ""
        assert index[2].normalized_text == "でえた"

    @pytest.mark.asyncio
    async def test_original_is_not_copied(self, builder, reading_provider, books):
        """Test the index refers to the caller's records."""
        index = await builder.build(books, SearchOptions(keys=("title",)), reading_provider)

        assert index[0].original is books[0]
        assert index[0].normalized_text == "走れめろす"

    @pytest.mark.asyncio
    async def test_build_is_sequential(self, builder, reading_provider, tokyo_corpus):
        """Test the reading provider never sees concurrent requests."""
        await builder.build(tokyo_corpus * 5, SearchOptions(), reading_provider)

        assert len(reading_provider.calls) == 20
        assert reading_provider.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_normalization_options_respected(self, builder, reading_provider):
        """Test the engine options reach the normalizer."""
        options = SearchOptions(normalize_long_vowel=False, expand_iteration_mark=False)
        index = await builder.build(["サーバー", "人々"], options, reading_provider)

        assert index[0].normalized_text == "さーばー"
        assert index[1].normalized_text == "人々"

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, builder, tokyo_corpus):
        """Test reading provider errors abort the build unchanged."""
        provider = FakeReadingProvider(fail_on="京都")

        with pytest.raises(ReadingProviderError):
            await builder.build(tokyo_corpus, SearchOptions(), provider)

    @pytest.mark.asyncio
    async def test_unexpected_failure_wrapped(self, builder, tokyo_corpus):
        """Test other errors abort the build with the failing position."""
        provider = FakeReadingProvider(fail_on="トウキョウ", error=ValueError("bad token"))

        with pytest.raises(IndexBuildError) as exc_info:
            await builder.build(tokyo_corpus, SearchOptions(), provider)

        assert exc_info.value.position == 2

    def test_to_dict(self):
        """Test the serialized field names."""
        record = IndexedRecord({"title": "こころ"}, "こころ", "こころ")
        assert record.to_dict() == {
            "original": {"title": "こころ"},
            "normalizedText": "こころ",
            "normalizedReading": "こころ",
        }
