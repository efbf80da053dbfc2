"""
Vocabulary catalog: built-in sample words and dictionary-backed loading
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace

from .dictionary_client import WordData
from .models import Definition, VocabularyEntry
from .utils import log_execution_time

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"


def _sample(
    word: str,
    definition: str,
    pronunciation: str,
    part_of_speech: str,
    category: str,
    example: str,
    synonyms: list[str],
    image_url: str,
) -> VocabularyEntry:
    return VocabularyEntry(
        id=word.lower(),
        word=word,
        meanings=(Definition(part_of_speech, definition, example),),
        category=category,
        synonyms=tuple(synonyms),
        pronunciation=pronunciation,
        image_url=image_url,
    )


SAMPLE_VOCABULARY: list[VocabularyEntry] = [
    _sample(
        "Serendipity",
        "The occurrence and development of events by chance in a happy or beneficial way",
        "ser-ən-ˈdi-pə-tē",
        "noun",
        "Abstract Concepts",
        "Meeting her old friend at the coffee shop was pure serendipity.",
        ["chance", "fortune", "luck", "providence"],
        "https://images.unsplash.com/photo-1518640467707-6811f4a6ab73?w=400&h=300&fit=crop",
    ),
    _sample(
        "Ephemeral",
        "Lasting for a very short time",
        "ɪˈfem(ə)rəl",
        "adjective",
        "Descriptive",
        "The beauty of cherry blossoms is ephemeral, lasting only a few weeks.",
        ["temporary", "fleeting", "transient", "brief"],
        "https://images.unsplash.com/photo-1522383225653-ed111181a951?w=400&h=300&fit=crop",
    ),
    _sample(
        "Ubiquitous",
        "Present, appearing, or found everywhere",
        "yo͞oˈbikwədəs",
        "adjective",
        "Descriptive",
        "Smartphones have become ubiquitous in modern society.",
        ["omnipresent", "pervasive", "universal", "widespread"],
        "https://images.unsplash.com/photo-1512941937669-90a1b58e7e9c?w=400&h=300&fit=crop",
    ),
    _sample(
        "Mellifluous",
        "Sweet or musical; pleasant to hear",
        "məˈliflo͞oəs",
        "adjective",
        "Sensory",
        "Her mellifluous voice captivated the entire audience.",
        ["melodious", "harmonious", "sweet-sounding", "musical"],
        "https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f?w=400&h=300&fit=crop",
    ),
    _sample(
        "Perspicacious",
        "Having a ready insight into and understanding of things",
        "ˌpərspɪˈkeɪʃəs",
        "adjective",
        "Intellectual",
        "The detective's perspicacious observations solved the case quickly.",
        ["perceptive", "astute", "shrewd", "discerning"],
        "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=400&h=300&fit=crop",
    ),
    _sample(
        "Quintessential",
        "Representing the most perfect example of a quality or class",
        "ˌkwin(t)əˈsen(t)SHəl",
        "adjective",
        "Descriptive",
        "Paris is the quintessential romantic city.",
        ["typical", "archetypal", "classic", "ideal"],
        "https://images.unsplash.com/photo-1502602898536-47ad22581b52?w=400&h=300&fit=crop",
    ),
    _sample(
        "Cacophony",
        "A harsh, discordant mixture of sounds",
        "kəˈkäfənē",
        "noun",
        "Sensory",
        "The construction site created a cacophony of drilling and hammering.",
        ["discord", "din", "racket", "clamor"],
        "https://images.unsplash.com/photo-1415734117253-603b0c3c3b3c?w=400&h=300&fit=crop",
    ),
    _sample(
        "Surreptitious",
        "Kept secret, especially because it would not be approved of",
        "ˌsərəpˈtiSHəs",
        "adjective",
        "Behavior",
        "He cast a surreptitious glance at his watch during the meeting.",
        ["secretive", "stealthy", "furtive", "covert"],
        "https://images.unsplash.com/photo-1574192324001-ee41e18ed679?w=400&h=300&fit=crop",
    ),
    _sample(
        "Magnanimous",
        "Very generous or forgiving, especially toward a rival or less powerful person",
        "maɡˈnanəməs",
        "adjective",
        "Character",
        "Despite winning, she was magnanimous toward her defeated opponent.",
        ["generous", "charitable", "benevolent", "noble"],
        "https://images.unsplash.com/photo-1529626455594-4ff0802cfb7e?w=400&h=300&fit=crop",
    ),
    _sample(
        "Ineffable",
        "Too great or extreme to be expressed or described in words",
        "ɪnˈɛfəbəl",
        "adjective",
        "Abstract Concepts",
        "The beauty of the sunset was ineffable, leaving everyone speechless.",
        ["indescribable", "inexpressible", "unspeakable", "sublime"],
        "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=400&h=300&fit=crop",
    ),
]

DEFAULT_WORDS: list[str] = [entry.id for entry in SAMPLE_VOCABULARY]

SAMPLE_CATEGORIES: dict[str, str] = {entry.id: entry.category for entry in SAMPLE_VOCABULARY}

PLACEHOLDER_ENTRY = VocabularyEntry(
    id="vocabulary",
    word="Vocabulary",
    meanings=(
        Definition(
            "noun",
            "The body of words used in a particular language",
            "Reading every day is a great way to grow your vocabulary.",
        ),
    ),
    category=DEFAULT_CATEGORY,
    synonyms=("lexicon", "wordstock", "terminology"),
)

LOAD_ERROR_MESSAGE = (
    "Failed to load vocabulary words from the dictionary service. "
    "Use /reload to try again."
)


class CatalogLoadError(Exception):
    """Raised when no word of the requested list could be fetched"""


def build_entry(data: WordData, requested_word: str | None = None) -> VocabularyEntry | None:
    """
    Normalize dictionary data into a VocabularyEntry

    Returns None when the data has no usable definition.
    """
    if not data.definitions:
        return None

    display = data.word or requested_word or ""
    word_id = (requested_word or display).strip().lower()
    if not word_id:
        return None

    meanings = list(data.definitions)
    if data.examples and not any(meaning.example for meaning in meanings):
        meanings[0] = replace(meanings[0], example=data.examples[0])

    category = SAMPLE_CATEGORIES.get(word_id)
    if category is None:
        part_of_speech = meanings[0].part_of_speech.strip()
        category = part_of_speech.title() if part_of_speech else DEFAULT_CATEGORY

    return VocabularyEntry(
        id=word_id,
        word=display[:1].upper() + display[1:],
        meanings=tuple(meanings),
        category=category,
        synonyms=tuple(data.synonyms),
        pronunciation=data.pronunciation,
    )


class CatalogLoader:
    """Fetches a word list from a dictionary client concurrently"""

    def __init__(self, client):
        self.client = client

    async def _fetch_entry(self, word: str) -> VocabularyEntry:
        data = await self.client.fetch_word(word)
        entry = build_entry(data, word)
        if entry is None:
            raise CatalogLoadError(f"No usable definition for '{word}'")
        return entry

    @log_execution_time
    async def load(self, words: list[str]) -> list[VocabularyEntry]:
        """
        Fetch every word, tolerating individual failures

        Args:
            words: Words to fetch

        Returns:
            Entries for the words that could be fetched, in request order

        Raises:
            CatalogLoadError: if the list is non-empty and every fetch failed
        """
        unique_words = list(dict.fromkeys(w.strip().lower() for w in words if w.strip()))
        if not unique_words:
            return []

        logger.info(f"Loading {len(unique_words)} words from dictionary service")
        results = await asyncio.gather(
            *(self._fetch_entry(word) for word in unique_words), return_exceptions=True
        )

        entries = []
        for word, result in zip(unique_words, results):
            if isinstance(result, BaseException):
                logger.warning(f"Failed to fetch '{word}': {result}")
                continue
            entries.append(result)

        if not entries:
            raise CatalogLoadError(f"All {len(unique_words)} word fetches failed")

        logger.info(f"Loaded {len(entries)} of {len(unique_words)} words")
        return entries


@dataclass
class CatalogState:
    """Catalog for one learner plus a user-visible error, if any"""

    entries: list[VocabularyEntry] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CatalogService:
    """Builds and caches each learner's catalog"""

    def __init__(self, client=None):
        self.loader = CatalogLoader(client) if client is not None else None
        self._catalogs: dict[int, CatalogState] = {}

    async def get_catalog(self, owner_id: int, saved_words: list[str] | None = None) -> CatalogState:
        """Return the cached catalog or load it"""
        cached = self._catalogs.get(owner_id)
        if cached is not None:
            return cached

        state = await self._build(saved_words or [])
        self._catalogs[owner_id] = state
        return state

    async def _build(self, saved_words: list[str]) -> CatalogState:
        if self.loader is None:
            sample_ids = {entry.id for entry in SAMPLE_VOCABULARY}
            extra = [word for word in saved_words if word not in sample_ids]
            if extra:
                logger.info(
                    f"Sample catalog in use, ignoring {len(extra)} saved words"
                )
            return CatalogState(entries=list(SAMPLE_VOCABULARY))

        words = DEFAULT_WORDS + [w for w in saved_words if w not in DEFAULT_WORDS]
        try:
            entries = await self.loader.load(words)
        except CatalogLoadError as e:
            logger.error(f"Catalog load failed: {e}")
            return CatalogState(entries=[PLACEHOLDER_ENTRY], error=LOAD_ERROR_MESSAGE)

        return CatalogState(entries=entries)

    def invalidate(self, owner_id: int) -> None:
        """Drop the cached catalog so the next request reloads it"""
        self._catalogs.pop(owner_id, None)
