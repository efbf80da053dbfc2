"""
Priority scoring for adaptive word selection
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from .config import Settings
from .ledger import PerformanceLedger
from .models import VocabularyEntry

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


@dataclass(frozen=True)
class PriorityWeights:
    """Weights of the additive priority heuristic"""

    new_word_priority: float = 100.0
    base_priority: float = 50.0
    difficulty_weight: float = 30.0
    recency_rate: float = 10.0  # per day since last seen
    recency_cap: float = 50.0
    accuracy_weight: float = 20.0
    max_priority: float = 100.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "PriorityWeights":
        return cls(
            new_word_priority=settings.new_word_priority,
            base_priority=settings.base_priority,
            difficulty_weight=settings.difficulty_weight,
            recency_rate=settings.recency_rate,
            recency_cap=settings.recency_cap,
            accuracy_weight=settings.accuracy_weight,
            max_priority=settings.max_priority,
        )


class PriorityScorer:
    """Ranks words so harder, older and less accurate words come back sooner"""

    def __init__(self, weights: PriorityWeights | None = None):
        self.weights = weights or PriorityWeights()

    def calculate_priority(
        self,
        entry: VocabularyEntry,
        ledger: PerformanceLedger,
        now: datetime | None = None,
    ) -> float:
        """
        Calculate the selection priority of a word

        Args:
            entry: Word to score
            ledger: Performance ledger to read from
            now: Reference time for recency (defaults to now)

        Returns:
            Non-negative priority, higher means "show sooner"
        """
        performance = ledger.get(entry.id)
        if performance is None or performance.attempts <= 0:
            return self.weights.new_word_priority

        now = now or datetime.now()
        days_since = 0.0
        if performance.last_seen is not None:
            days_since = max(
                0.0, (now - performance.last_seen).total_seconds() / SECONDS_PER_DAY
            )

        priority = self.weights.base_priority
        priority += performance.difficulty_score * self.weights.difficulty_weight
        priority += min(days_since * self.weights.recency_rate, self.weights.recency_cap)
        priority += (1 - performance.accuracy) * self.weights.accuracy_weight

        return max(0.0, min(priority, self.weights.max_priority))

    def rank(
        self,
        entries: list[VocabularyEntry],
        ledger: PerformanceLedger,
        now: datetime | None = None,
    ) -> list[tuple[VocabularyEntry, float]]:
        """Score entries and sort them by descending priority (stable)"""
        now = now or datetime.now()
        scored = [(entry, self.calculate_priority(entry, ledger, now)) for entry in entries]
        return sorted(scored, key=lambda pair: pair[1], reverse=True)


# Global instance
_scorer = None


def get_scorer() -> PriorityScorer:
    """Get global priority scorer instance"""
    global _scorer
    if _scorer is None:
        from .config import get_settings

        _scorer = PriorityScorer(PriorityWeights.from_settings(get_settings()))
    return _scorer
