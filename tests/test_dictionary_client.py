"""
Tests for the dictionary service adapters using httpx mock transports
"""

import httpx
import pytest

from vocabmaster.dictionary_client import (
    DictionaryApiError,
    FreeDictionaryClient,
    MockDictionaryClient,
    WordsApiClient,
    get_dictionary_client,
)

FREE_DICTIONARY_RESPONSE = [
    {
        "word": "laconic",
        "phonetic": "/ləˈkɒnɪk/",
        "phonetics": [
            {"text": "/ləˈkɒnɪk/", "audio": ""},
            {"text": "/ləˈkɑnɪk/", "audio": "https://example.org/laconic-us.mp3"},
        ],
        "meanings": [
            {
                "partOfSpeech": "adjective",
                "definitions": [
                    {
                        "definition": "Using very few words.",
                        "example": "His laconic reply suggested a lack of interest.",
                        "synonyms": ["terse"],
                    },
                    {"definition": "Concise."},
                ],
                "synonyms": ["brief", "terse"],
                "antonyms": ["verbose"],
            }
        ],
    }
]


class TestFreeDictionaryClient:
    """Test FreeDictionaryClient"""

    @pytest.mark.asyncio
    async def test_fetch_word(self):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            return httpx.Response(200, json=FREE_DICTIONARY_RESPONSE)

        client = FreeDictionaryClient(
            base_url="https://dict.test/api/v2/entries/en",
            transport=httpx.MockTransport(handler),
        )

        data = await client.fetch_word("laconic")

        assert requested == ["/api/v2/entries/en/laconic"]
        assert data.word == "laconic"
        assert [d.definition for d in data.definitions] == [
            "Using very few words.",
            "Concise.",
        ]
        assert data.definitions[0].part_of_speech == "adjective"
        assert data.examples == ["His laconic reply suggested a lack of interest."]
        assert data.synonyms == ["brief", "terse"]
        assert data.pronunciation == "/ləˈkɑnɪk/"

    @pytest.mark.asyncio
    async def test_not_found(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(404, json={"title": "No Definitions Found"})
        )
        client = FreeDictionaryClient(base_url="https://dict.test", transport=transport)

        with pytest.raises(DictionaryApiError):
            await client.fetch_word("qwertyuiop")

    @pytest.mark.asyncio
    async def test_empty_list(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
        client = FreeDictionaryClient(base_url="https://dict.test", transport=transport)

        with pytest.raises(DictionaryApiError):
            await client.fetch_word("nothing")

    @pytest.mark.asyncio
    async def test_network_error_is_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = FreeDictionaryClient(
            base_url="https://dict.test", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(DictionaryApiError):
            await client.fetch_word("laconic")


class TestWordsApiClient:
    """Test WordsApiClient"""

    @pytest.mark.asyncio
    async def test_fetch_word_combines_resources(self):
        seen_headers = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen_headers.append(request.headers.get("X-RapidAPI-Key"))
            resource = request.url.path.rsplit("/", 1)[-1]
            if resource == "definitions":
                return httpx.Response(
                    200,
                    json={"definitions": [{"definition": "lasting briefly", "partOfSpeech": "adjective"}]},
                )
            if resource == "synonyms":
                return httpx.Response(200, json={"synonyms": ["fleeting", "transient", "fleeting"]})
            return httpx.Response(200, json={"examples": ["an ephemeral joy"]})

        client = WordsApiClient(
            api_key="secret",
            base_url="https://words.test/words",
            transport=httpx.MockTransport(handler),
        )

        data = await client.fetch_word("ephemeral")

        assert data.definitions[0].definition == "lasting briefly"
        assert data.definitions[0].part_of_speech == "adjective"
        assert data.synonyms == ["fleeting", "transient"]
        assert data.examples == ["an ephemeral joy"]
        assert seen_headers == ["secret"] * 3

    @pytest.mark.asyncio
    async def test_failed_sub_request_degrades_to_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/definitions"):
                return httpx.Response(200, json={"definitions": [{"definition": "x"}]})
            return httpx.Response(500)

        client = WordsApiClient(
            api_key="secret",
            base_url="https://words.test/words",
            transport=httpx.MockTransport(handler),
        )

        data = await client.fetch_word("word")

        assert len(data.definitions) == 1
        assert data.synonyms == []
        assert data.examples == []


class TestMockDictionaryClient:
    """Test MockDictionaryClient and client selection"""

    @pytest.mark.asyncio
    async def test_unknown_word_raises(self):
        client = MockDictionaryClient()

        with pytest.raises(DictionaryApiError):
            await client.fetch_word("missing")
        assert client.requested == ["missing"]

    def test_get_dictionary_client(self):
        assert get_dictionary_client("sample") is None
        assert isinstance(get_dictionary_client("dictionary"), FreeDictionaryClient)
        assert isinstance(get_dictionary_client("wordsapi"), WordsApiClient)
