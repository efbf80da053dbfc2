"""
Dictionary service adapters
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import get_settings
from .models import Definition

logger = logging.getLogger(__name__)


class DictionaryApiError(Exception):
    """Raised when a word cannot be fetched from the dictionary service"""


@dataclass
class WordData:
    """Normalized dictionary response for one word"""

    word: str
    definitions: list[Definition] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    pronunciation: str = ""


def _unique(items: list[str]) -> list[str]:
    """Remove duplicates while keeping the first occurrence order"""
    return list(dict.fromkeys(item for item in items if item))


class FreeDictionaryClient:
    """Client for the Free Dictionary API (dictionaryapi.dev)"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.dictionary_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self._transport = transport

    async def _request(self, word: str) -> Any:
        url = f"{self.base_url}/{word}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise DictionaryApiError(f"Request for '{word}' failed: {e}") from e

        if response.status_code != 200:
            raise DictionaryApiError(f"API request failed: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise DictionaryApiError(f"Invalid JSON for '{word}'") from e

    async def fetch_word(self, word: str) -> WordData:
        """
        Fetch and normalize dictionary data for a word

        Args:
            word: Word to look up

        Returns:
            WordData with definitions, examples and synonyms

        Raises:
            DictionaryApiError: if the word cannot be fetched
        """
        data = await self._request(word)
        if not isinstance(data, list) or not data:
            raise DictionaryApiError(f"No data found for '{word}'")

        return self._parse_response(data[0])

    def _parse_response(self, word_data: dict[str, Any]) -> WordData:
        definitions = []
        synonyms: list[str] = []
        examples: list[str] = []

        for meaning in word_data.get("meanings") or []:
            part_of_speech = meaning.get("partOfSpeech", "")
            synonyms.extend(meaning.get("synonyms") or [])

            for definition in meaning.get("definitions") or []:
                text = definition.get("definition")
                if not text:
                    continue
                example = definition.get("example")
                definitions.append(Definition(part_of_speech, text, example))
                synonyms.extend(definition.get("synonyms") or [])
                if example:
                    examples.append(example)

        # Prefer the pronunciation that comes with audio
        phonetics = word_data.get("phonetics") or []
        with_audio = next((p for p in phonetics if p.get("audio")), None)
        pronunciation = (
            (with_audio or {}).get("text")
            or word_data.get("phonetic")
            or (phonetics[0].get("text") if phonetics else "")
            or ""
        )

        return WordData(
            word=word_data.get("word", ""),
            definitions=definitions,
            examples=examples,
            synonyms=_unique(synonyms),
            pronunciation=pronunciation,
        )


class WordsApiClient:
    """Client for WordsAPI (RapidAPI)"""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.words_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self.headers = {
            "X-RapidAPI-Key": api_key or settings.words_api_key,
            "X-RapidAPI-Host": settings.words_api_host,
        }
        self._transport = transport

    async def _get(self, client: httpx.AsyncClient, word: str, resource: str) -> dict:
        response = await client.get(f"{self.base_url}/{word}/{resource}")
        if response.status_code != 200:
            raise DictionaryApiError(f"API request failed: {response.status_code}")
        return response.json()

    async def _get_or_empty(
        self, client: httpx.AsyncClient, word: str, resource: str
    ) -> dict:
        """Sub-resource lookup where a failure degrades to an empty result"""
        try:
            return await self._get(client, word, resource)
        except (DictionaryApiError, httpx.HTTPError, ValueError) as e:
            logger.warning(f"WordsAPI {resource} lookup failed for '{word}': {e}")
            return {}

    async def fetch_word(self, word: str) -> WordData:
        """Fetch definitions, synonyms and examples concurrently"""
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self.headers, transport=self._transport
        ) as client:
            definitions, synonyms, examples = await asyncio.gather(
                self._get_or_empty(client, word, "definitions"),
                self._get_or_empty(client, word, "synonyms"),
                self._get_or_empty(client, word, "examples"),
            )

        return WordData(
            word=word,
            definitions=[
                Definition(item.get("partOfSpeech") or "", item["definition"])
                for item in definitions.get("definitions") or []
                if item.get("definition")
            ],
            synonyms=_unique(synonyms.get("synonyms") or []),
            examples=list(examples.get("examples") or []),
        )


class MockDictionaryClient:
    """In-memory dictionary client for tests and offline use"""

    def __init__(self, words: dict[str, WordData] | None = None):
        self.words = {key.lower(): value for key, value in (words or {}).items()}
        self.requested: list[str] = []

    async def fetch_word(self, word: str) -> WordData:
        self.requested.append(word)
        data = self.words.get(word.lower())
        if data is None:
            raise DictionaryApiError(f"No data found for '{word}'")
        return data


def get_dictionary_client(source: str | None = None):
    """Create the dictionary client configured by catalog_source"""
    source = source or get_settings().catalog_source
    if source == "wordsapi":
        return WordsApiClient()
    if source == "dictionary":
        return FreeDictionaryClient()
    return None
