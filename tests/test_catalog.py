"""
Unit tests for catalog loading
"""

import pytest

from vocabmaster.catalog import (
    DEFAULT_WORDS,
    LOAD_ERROR_MESSAGE,
    PLACEHOLDER_ENTRY,
    SAMPLE_VOCABULARY,
    CatalogLoader,
    CatalogLoadError,
    CatalogService,
    build_entry,
)
from vocabmaster.dictionary_client import MockDictionaryClient, WordData
from vocabmaster.models import Definition


def word_data(word: str, part_of_speech: str = "noun", **kwargs) -> WordData:
    return WordData(
        word=word,
        definitions=[Definition(part_of_speech, f"Meaning of {word}")],
        **kwargs,
    )


class TestSampleVocabulary:
    """Test the built-in sample list"""

    def test_ten_unique_words(self):
        ids = [entry.id for entry in SAMPLE_VOCABULARY]
        assert len(ids) == 10
        assert len(set(ids)) == 10
        assert ids[0] == "serendipity"
        assert DEFAULT_WORDS == ids

    def test_entries_are_complete(self):
        for entry in SAMPLE_VOCABULARY:
            assert entry.definition
            assert entry.example
            assert entry.category
            assert entry.synonyms


class TestBuildEntry:
    """Test build_entry normalization"""

    def test_no_definitions(self):
        assert build_entry(WordData(word="empty")) is None

    def test_sample_word_keeps_sample_category(self):
        entry = build_entry(word_data("ephemeral", "adjective"), "ephemeral")

        assert entry.id == "ephemeral"
        assert entry.word == "Ephemeral"
        assert entry.category == "Descriptive"

    def test_category_from_part_of_speech(self):
        entry = build_entry(word_data("run", "verb"), "run")
        assert entry.category == "Verb"

    def test_category_default(self):
        entry = build_entry(word_data("thing", ""), "thing")
        assert entry.category == "General"

    def test_example_attached_when_missing(self):
        data = word_data("laconic", "adjective", examples=["A laconic reply."])
        entry = build_entry(data, "laconic")
        assert entry.example == "A laconic reply."

    def test_synonyms_and_pronunciation(self):
        data = word_data("laconic", synonyms=["terse", "brief"], pronunciation="ləˈkɒnɪk")
        entry = build_entry(data, "laconic")

        assert entry.synonyms == ("terse", "brief")
        assert entry.pronunciation == "ləˈkɒnɪk"


class TestCatalogLoader:
    """Test CatalogLoader.load"""

    @pytest.mark.asyncio
    async def test_partial_failure_is_tolerated(self):
        client = MockDictionaryClient({"alpha": word_data("alpha"), "gamma": word_data("gamma")})
        loader = CatalogLoader(client)

        entries = await loader.load(["alpha", "beta", "gamma"])

        assert [entry.id for entry in entries] == ["alpha", "gamma"]

    @pytest.mark.asyncio
    async def test_total_failure_raises(self):
        loader = CatalogLoader(MockDictionaryClient())

        with pytest.raises(CatalogLoadError):
            await loader.load(["alpha", "beta"])

    @pytest.mark.asyncio
    async def test_entries_without_definitions_count_as_failures(self):
        client = MockDictionaryClient({"alpha": WordData(word="alpha")})

        with pytest.raises(CatalogLoadError):
            await CatalogLoader(client).load(["alpha"])

    @pytest.mark.asyncio
    async def test_duplicates_fetched_once(self):
        client = MockDictionaryClient({"alpha": word_data("alpha")})

        entries = await CatalogLoader(client).load(["alpha", "Alpha ", "alpha"])

        assert len(entries) == 1
        assert client.requested == ["alpha"]

    @pytest.mark.asyncio
    async def test_empty_list(self):
        assert await CatalogLoader(MockDictionaryClient()).load([]) == []


class TestCatalogService:
    """Test CatalogService caching and fallback"""

    @pytest.mark.asyncio
    async def test_sample_source(self):
        service = CatalogService()
        state = await service.get_catalog(321, ["laconic"])

        assert state.ok
        assert state.entries == SAMPLE_VOCABULARY

    @pytest.mark.asyncio
    async def test_dictionary_source_appends_saved_words(self):
        words = {word: word_data(word) for word in DEFAULT_WORDS + ["laconic"]}
        client = MockDictionaryClient(words)
        service = CatalogService(client)

        state = await service.get_catalog(321, ["laconic", "ephemeral"])

        assert state.ok
        assert len(state.entries) == 11
        assert state.entries[-1].id == "laconic"

    @pytest.mark.asyncio
    async def test_total_failure_gives_placeholder(self):
        service = CatalogService(MockDictionaryClient())
        state = await service.get_catalog(321)

        assert not state.ok
        assert state.error == LOAD_ERROR_MESSAGE
        assert "/reload" in state.error
        assert state.entries == [PLACEHOLDER_ENTRY]

    @pytest.mark.asyncio
    async def test_catalog_is_cached_until_invalidated(self):
        client = MockDictionaryClient({"serendipity": word_data("serendipity")})
        service = CatalogService(client)

        first = await service.get_catalog(321)
        requests = len(client.requested)
        second = await service.get_catalog(321)

        assert first is second
        assert len(client.requested) == requests

        service.invalidate(321)
        await service.get_catalog(321)
        assert len(client.requested) == requests * 2

    @pytest.mark.asyncio
    async def test_cache_is_per_owner(self):
        service = CatalogService(MockDictionaryClient({"serendipity": word_data("serendipity")}))

        await service.get_catalog(321)
        failed_client = MockDictionaryClient()
        service.loader.client = failed_client
        state = await service.get_catalog(123)

        assert not state.ok
