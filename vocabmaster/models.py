"""
Domain models for VocabMaster
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Rating(Enum):
    """Self-assessed recall difficulty"""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def contribution(self) -> float:
        """Difficulty contribution folded into the running average"""
        return _RATING_CONTRIBUTIONS[self]

    @property
    def is_correct(self) -> bool:
        """Only an easy rating counts as a correct recall"""
        return self is Rating.EASY

    @classmethod
    def from_value(cls, value: "Rating | str") -> "Rating":
        """Convert a rating name such as 'easy' or 'e' into a Rating"""
        if isinstance(value, Rating):
            return value

        normalized = str(value).strip().lower()
        for rating in cls:
            if normalized in (rating.value, rating.value[0]):
                return rating

        raise ValueError(f"Rating must be one of easy, medium, hard, got {value!r}")


_RATING_CONTRIBUTIONS = {
    Rating.EASY: 0.1,
    Rating.MEDIUM: 0.5,
    Rating.HARD: 0.9,
}


@dataclass(frozen=True)
class Definition:
    """A single sense of a word"""

    part_of_speech: str
    definition: str
    example: str | None = None


@dataclass(frozen=True)
class VocabularyEntry:
    """Vocabulary word available for study"""

    id: str
    word: str
    meanings: tuple[Definition, ...]
    category: str
    synonyms: tuple[str, ...] = ()
    pronunciation: str = ""
    image_url: str | None = None

    @property
    def definition(self) -> str:
        """First definition text, empty when the entry has none"""
        return self.meanings[0].definition if self.meanings else ""

    @property
    def part_of_speech(self) -> str:
        return self.meanings[0].part_of_speech if self.meanings else ""

    @property
    def example(self) -> str:
        """First available usage example"""
        for meaning in self.meanings:
            if meaning.example:
                return meaning.example
        return ""


@dataclass
class WordPerformance:
    """Accumulated performance statistics for one word"""

    word_id: str
    category: str
    attempts: int = 0
    correct_attempts: int = 0
    difficulty_score: float = 0.5
    accuracy: float = 0.0
    last_seen: datetime | None = None


@dataclass
class CategoryInsight:
    """Accuracy rollup for one category"""

    name: str
    accuracy: float  # percent, 0-100
    word_count: int


@dataclass
class PerformanceInsights:
    """Strong/weak categories and recommendations"""

    strong_categories: list[CategoryInsight] = field(default_factory=list)
    weak_categories: list[CategoryInsight] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
