"""
Per-word performance ledger
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from .models import Rating, VocabularyEntry, WordPerformance

logger = logging.getLogger(__name__)


@dataclass
class RecordResult:
    """Outcome of recording one response into the ledger"""

    performance: WordPerformance
    was_first_attempt: bool


class PerformanceLedger:
    """Owns every WordPerformance record and the lifetime words-studied counter"""

    def __init__(
        self,
        performances: dict[str, WordPerformance] | None = None,
        total_words_studied: int = 0,
    ):
        self._performances: dict[str, WordPerformance] = dict(performances or {})
        self.total_words_studied = total_words_studied

    def __len__(self) -> int:
        return len(self._performances)

    def __contains__(self, word_id: str) -> bool:
        return word_id in self._performances

    def get(self, word_id: str) -> WordPerformance | None:
        """Get a copy of the performance record for a word"""
        performance = self._performances.get(word_id)
        return replace(performance) if performance else None

    def performances(self) -> list[WordPerformance]:
        """All records, in the order they were first created"""
        return [replace(perf) for perf in self._performances.values()]

    def snapshot(self, word_id: str) -> WordPerformance | None:
        """Pre-update snapshot used for first-attempt detection"""
        return self.get(word_id)

    def record(
        self, entry: VocabularyEntry, rating: Rating, now: datetime | None = None
    ) -> WordPerformance:
        """
        Apply a rating to the entry's record

        Args:
            entry: Word that was answered
            rating: User's self-assessed difficulty
            now: Response time (defaults to now)

        Returns:
            Copy of the updated record
        """
        now = now or datetime.now()
        existing = self._performances.get(entry.id) or WordPerformance(
            word_id=entry.id, category=entry.category
        )

        attempts = existing.attempts + 1
        correct_attempts = existing.correct_attempts + (1 if rating.is_correct else 0)

        updated = replace(
            existing,
            attempts=attempts,
            correct_attempts=correct_attempts,
            accuracy=correct_attempts / attempts,
            difficulty_score=(existing.difficulty_score + rating.contribution) / 2,
            last_seen=now,
        )
        self._performances[entry.id] = updated

        logger.debug(
            f"Recorded {rating.value} for '{entry.id}': attempts={attempts}, "
            f"correct={correct_attempts}, difficulty={updated.difficulty_score:.3f}"
        )
        return replace(updated)

    def register_study(self, was_first_attempt: bool) -> int:
        """Bump the lifetime counter when a word is answered for the first time"""
        if was_first_attempt:
            self.total_words_studied += 1
        return self.total_words_studied

    def record_response(
        self, entry: VocabularyEntry, rating: Rating, now: datetime | None = None
    ) -> RecordResult:
        """Record a response and update the lifetime counter in one step"""
        before = self.snapshot(entry.id)
        was_first_attempt = before is None or before.attempts == 0

        performance = self.record(entry, rating, now)
        self.register_study(was_first_attempt)

        return RecordResult(performance=performance, was_first_attempt=was_first_attempt)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the persisted record layout"""
        return {
            "performances": {
                word_id: {
                    "word_id": perf.word_id,
                    "attempts": perf.attempts,
                    "correct_attempts": perf.correct_attempts,
                    "difficulty_score": perf.difficulty_score,
                    "accuracy": perf.accuracy,
                    "last_seen": perf.last_seen.isoformat() if perf.last_seen else None,
                    "category": perf.category,
                }
                for word_id, perf in self._performances.items()
            },
            "total_words_studied": self.total_words_studied,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PerformanceLedger":
        """Build a ledger from a persisted record, tolerating malformed data"""
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Ignoring malformed ledger record")
            return cls()

        performances = {}
        raw_performances = data.get("performances")
        if not isinstance(raw_performances, dict):
            raw_performances = {}

        for word_id, raw in raw_performances.items():
            performance = _parse_performance(word_id, raw)
            if performance is None:
                logger.warning(f"Skipping malformed performance record for '{word_id}'")
                continue
            performances[word_id] = performance

        try:
            total_words_studied = max(0, int(data.get("total_words_studied", 0)))
        except (TypeError, ValueError, OverflowError):
            total_words_studied = 0

        return cls(performances, total_words_studied)


def _parse_performance(word_id: str, raw: Any) -> WordPerformance | None:
    """Parse one persisted record, returning None if it is unusable"""
    if not isinstance(raw, dict):
        return None

    try:
        attempts = int(raw.get("attempts", 0))
        correct_attempts = int(raw.get("correct_attempts", 0))
        difficulty_score = float(raw.get("difficulty_score", 0.5))
        last_seen_raw = raw.get("last_seen")
        last_seen = datetime.fromisoformat(last_seen_raw) if last_seen_raw else None
    except (TypeError, ValueError, OverflowError):
        return None

    # Recency math compares against naive local time
    if last_seen is not None and last_seen.tzinfo is not None:
        last_seen = last_seen.astimezone().replace(tzinfo=None)

    if attempts < 0 or not 0 <= correct_attempts <= attempts:
        return None
    if not 0.0 <= difficulty_score <= 1.0:
        return None

    return WordPerformance(
        word_id=str(word_id),
        category=str(raw.get("category") or "General"),
        attempts=attempts,
        correct_attempts=correct_attempts,
        difficulty_score=difficulty_score,
        accuracy=correct_attempts / attempts if attempts else 0.0,
        last_seen=last_seen,
    )
