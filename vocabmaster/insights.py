"""
Performance insights and analytics derived from the ledger
"""

import logging
from dataclasses import dataclass, field

from .config import Settings
from .ledger import PerformanceLedger
from .models import CategoryInsight, PerformanceInsights, VocabularyEntry, WordPerformance

logger = logging.getLogger(__name__)


@dataclass
class CategoryStats:
    """Per-category statistics for the analytics view"""

    name: str
    total_attempts: int = 0
    correct_attempts: int = 0
    words_studied: int = 0
    difficulty_sum: float = 0.0

    @property
    def accuracy(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct_attempts / self.total_attempts * 100

    @property
    def average_difficulty(self) -> float:
        if self.words_studied == 0:
            return 0.0
        return self.difficulty_sum / self.words_studied


@dataclass
class AnalyticsSummary:
    """Overall learning statistics"""

    words_studied: int = 0
    total_attempts: int = 0
    total_correct: int = 0
    overall_accuracy: float = 0.0
    categories: list[CategoryStats] = field(default_factory=list)
    challenging_words: list[tuple[VocabularyEntry, WordPerformance]] = field(
        default_factory=list
    )
    mastered_words: list[tuple[VocabularyEntry, WordPerformance]] = field(
        default_factory=list
    )


class InsightsAggregator:
    """Groups ledger records by category and turns them into recommendations"""

    def __init__(
        self,
        strong_threshold: float = 70.0,
        min_category_words: int = 2,
        max_reported: int = 5,
        words_studied_milestone: int = 100,
    ):
        self.strong_threshold = strong_threshold
        self.min_category_words = min_category_words
        self.max_reported = max_reported
        self.words_studied_milestone = words_studied_milestone

    @classmethod
    def from_settings(cls, settings: Settings) -> "InsightsAggregator":
        return cls(
            strong_threshold=settings.strong_category_threshold,
            min_category_words=settings.min_category_words,
            max_reported=settings.max_reported_categories,
            words_studied_milestone=settings.words_studied_milestone,
        )

    def category_insights(self, ledger: PerformanceLedger) -> list[CategoryInsight]:
        """Per-category accuracy for categories with enough attempted words"""
        totals: dict[str, list[int]] = {}

        # Categories keep the order in which the ledger first saw them
        for perf in ledger.performances():
            if perf.attempts <= 0:
                continue
            total = totals.setdefault(perf.category, [0, 0, 0])
            total[0] += perf.attempts
            total[1] += perf.correct_attempts
            total[2] += 1

        return [
            CategoryInsight(name=name, accuracy=correct / attempts * 100, word_count=words)
            for name, (attempts, correct, words) in totals.items()
            if words >= self.min_category_words
        ]

    def get_performance_insights(self, ledger: PerformanceLedger) -> PerformanceInsights:
        """
        Build strong/weak category lists and textual recommendations

        Args:
            ledger: Performance ledger to aggregate

        Returns:
            PerformanceInsights with at most max_reported categories per list
        """
        categories = self.category_insights(ledger)

        strong = [cat for cat in categories if cat.accuracy >= self.strong_threshold]
        weak = [cat for cat in categories if cat.accuracy < self.strong_threshold]

        recommendations = []
        if weak:
            recommendations.append(
                f"Focus on {weak[0].name} words - you're at "
                f"{round(weak[0].accuracy)}% accuracy."
            )
        if strong:
            recommendations.append(
                f"Great job with {strong[0].name}! You're excelling at "
                f"{round(strong[0].accuracy)}% accuracy."
            )
        if ledger.total_words_studied >= self.words_studied_milestone:
            recommendations.append(
                "Consider reviewing your difficult words from previous sessions."
            )
        else:
            recommendations.append(
                "Keep practicing daily to build your vocabulary foundation."
            )

        return PerformanceInsights(
            strong_categories=strong[: self.max_reported],
            weak_categories=weak[: self.max_reported],
            recommendations=recommendations,
        )

    def get_analytics(
        self, ledger: PerformanceLedger, catalog: list[VocabularyEntry]
    ) -> AnalyticsSummary:
        """Overall accuracy, per-category stats, challenging and mastered words"""
        performances = ledger.performances()
        total_attempts = sum(perf.attempts for perf in performances)
        total_correct = sum(perf.correct_attempts for perf in performances)

        categories: dict[str, CategoryStats] = {}
        studied: list[tuple[VocabularyEntry, WordPerformance]] = []
        for entry in catalog:
            perf = ledger.get(entry.id)
            if perf is None or perf.attempts == 0:
                continue
            studied.append((entry, perf))

            stats = categories.setdefault(entry.category, CategoryStats(entry.category))
            stats.total_attempts += perf.attempts
            stats.correct_attempts += perf.correct_attempts
            stats.words_studied += 1
            stats.difficulty_sum += perf.difficulty_score

        challenging = sorted(
            (pair for pair in studied if pair[1].attempts >= 2),
            key=lambda pair: pair[1].difficulty_score,
            reverse=True,
        )
        mastered = [
            pair for pair in studied if pair[1].attempts >= 3 and pair[1].accuracy >= 0.8
        ]

        return AnalyticsSummary(
            words_studied=ledger.total_words_studied,
            total_attempts=total_attempts,
            total_correct=total_correct,
            overall_accuracy=(
                total_correct / total_attempts * 100 if total_attempts > 0 else 0.0
            ),
            categories=list(categories.values()),
            challenging_words=challenging[: self.max_reported],
            mastered_words=mastered[: self.max_reported],
        )
