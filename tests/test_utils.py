"""
Unit tests for utility functions
"""

import pytest

from vocabmaster.catalog import SAMPLE_VOCABULARY
from vocabmaster.insights import AnalyticsSummary, CategoryStats
from vocabmaster.models import CategoryInsight, PerformanceInsights, Rating
from vocabmaster.utils import (
    Timer,
    calculate_success_rate,
    extract_json_safely,
    format_card_answer,
    format_dashboard_hint,
    format_flashcard,
    format_insights,
    format_analytics,
    format_json_safely,
    format_saved_words,
    format_session_summary,
    get_rating_emoji,
    log_execution_time,
    parse_word_list,
    truncate_text,
)


class TestTextFormatting:
    """Test text formatting functions"""

    def test_format_flashcard(self):
        entry = SAMPLE_VOCABULARY[0]
        result = format_flashcard(entry, answered=4, session_length=20)

        assert result.startswith("5/20. <b>Serendipity</b>")
        assert entry.pronunciation in result
        assert "Abstract Concepts" in result
        assert entry.definition not in result

    def test_format_flashcard_without_progress(self):
        result = format_flashcard(SAMPLE_VOCABULARY[1])
        assert result.startswith("<b>Ephemeral</b>")

    def test_format_card_answer(self):
        entry = SAMPLE_VOCABULARY[1]
        result = format_card_answer(entry)

        assert entry.definition in result
        assert entry.example in result
        assert "temporary" in result

    def test_html_is_escaped(self):
        from vocabmaster.models import Definition, VocabularyEntry

        entry = VocabularyEntry(
            id="tag",
            word="<tag>",
            meanings=(Definition("noun", "a & b"),),
            category="General",
        )

        assert "&lt;tag&gt;" in format_flashcard(entry)
        assert "a &amp; b" in format_card_answer(entry)

    def test_format_session_summary(self):
        result = format_session_summary(20, 10, 6, 4, 93.4)

        assert "<b>20</b>" in result
        assert "50.0%" in result
        assert "93.4s" in result

    def test_format_insights(self):
        insights = PerformanceInsights(
            strong_categories=[CategoryInsight("Descriptive", 80.0, 3)],
            weak_categories=[CategoryInsight("Sensory", 25.0, 2)],
            recommendations=["Focus on Sensory words - you're at 25% accuracy."],
        )

        result = format_insights(insights, 57)

        assert "<b>57</b>" in result
        assert "Descriptive: 80%" in result
        assert "Sensory: 25%" in result
        assert "Focus on Sensory words" in result

    def test_format_analytics(self):
        summary = AnalyticsSummary(
            words_studied=3,
            total_attempts=6,
            total_correct=3,
            overall_accuracy=50.0,
            categories=[CategoryStats("Sensory", 6, 3, 3, 1.5)],
        )

        result = format_analytics(summary)
        assert "Total reviews: 6" in result
        assert "Sensory: 50% accuracy, 3 words, difficulty 0.50" in result

    def test_format_dashboard_hint(self):
        assert "After 38 more words" in format_dashboard_hint(12, 50)
        assert "After 0 more words" in format_dashboard_hint(80, 50)

    def test_format_saved_words(self):
        assert "empty" in format_saved_words([])
        result = format_saved_words(["laconic", "terse"])
        assert "(2)" in result
        assert "• terse" in result


class TestParsing:
    """Test input parsing helpers"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("laconic, terse; brief", ["laconic", "terse", "brief"]),
            ("  one   two\nthree ", ["one", "two", "three"]),
            ("", []),
            (" ,, ; ", []),
        ],
    )
    def test_parse_word_list(self, text, expected):
        assert parse_word_list(text) == expected

    def test_extract_json_safely(self):
        assert extract_json_safely('{"a": 1}') == {"a": 1}
        assert extract_json_safely("not json") == {}
        assert extract_json_safely("[1, 2]") == {}
        assert extract_json_safely("") == {}

    def test_format_json_safely(self):
        assert format_json_safely({"a": "b"}) == '{"a":"b"}'
        assert format_json_safely({"a": object()}) == "{}"


class TestHelpers:
    """Test small helpers"""

    def test_truncate_text(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a" * 20, 10) == "aaaaaaa..."

    def test_get_rating_emoji(self):
        assert get_rating_emoji(Rating.EASY) == "✅"
        assert get_rating_emoji(Rating.HARD) == "❌"

    def test_calculate_success_rate(self):
        assert calculate_success_rate(0, 0) == 0.0
        assert calculate_success_rate(3, 4) == 75.0

    def test_timer(self):
        timer = Timer()
        assert timer.elapsed() is None
        assert timer.get_elapsed_time() == 0.0

        timer.start()
        timer.stop()
        assert timer.elapsed() >= 0.0

    def test_log_execution_time_sync(self):
        @log_execution_time
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    @pytest.mark.asyncio
    async def test_log_execution_time_async(self):
        @log_execution_time
        async def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await fail()
