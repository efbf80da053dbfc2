"""
Utility functions for VocabMaster
"""

import html
import inspect
import json
import logging
import re
import time
from functools import wraps
from typing import Any

from .models import PerformanceInsights, Rating, VocabularyEntry

logger = logging.getLogger(__name__)


def format_flashcard(
    entry: VocabularyEntry, answered: int = 0, session_length: int = 0
) -> str:
    """Format the front of a flashcard"""
    progress_info = f"{answered + 1}/{session_length}. " if session_length > 0 else ""

    result = f"{progress_info}<b>{html.escape(entry.word)}</b>"
    if entry.pronunciation:
        result += f"\n🔊 <i>{html.escape(entry.pronunciation)}</i>"
    if entry.part_of_speech:
        result += f"\n🏷️ {html.escape(entry.part_of_speech)} · {html.escape(entry.category)}"

    result += "\n\nDo you know what this word means?"
    return result


def format_card_answer(entry: VocabularyEntry) -> str:
    """Format the back of a flashcard"""
    result = f"<b>{html.escape(entry.word)}</b>"
    if entry.part_of_speech:
        result += f" - {html.escape(entry.part_of_speech)}"

    result += f"\n\n📖 {html.escape(entry.definition or 'No definition available.')}"

    if entry.example:
        result += f"\n\n📝 <i>{html.escape(entry.example)}</i>"

    if entry.synonyms:
        result += f"\n\n🔁 {html.escape(', '.join(entry.synonyms[:4]))}"

    result += "\n\nHow well did you know this word?"
    return result


def format_session_summary(
    answered: int, easy: int, medium: int, hard: int, elapsed_seconds: float
) -> str:
    """Format the end-of-session summary"""
    accuracy = calculate_success_rate(easy, answered)
    return f"""✅ <b>Session complete!</b>

📊 <b>Results:</b>
• Cards reviewed: <b>{answered}</b>
• {get_rating_emoji(Rating.EASY)} Easy: <b>{easy}</b>
• {get_rating_emoji(Rating.MEDIUM)} Medium: <b>{medium}</b>
• {get_rating_emoji(Rating.HARD)} Hard: <b>{hard}</b>
• Accuracy: <b>{accuracy:.1f}%</b>
• Time: <b>{elapsed_seconds:.1f}s</b>

🎯 Use /study to start a new session or /insights to see your progress."""


def format_insights(insights: PerformanceInsights, total_words_studied: int) -> str:
    """Format the performance dashboard"""
    result = f"📈 <b>Your progress</b>\n\n📚 Words studied: <b>{total_words_studied}</b>\n"

    if insights.strong_categories:
        result += "\n💪 <b>Strong categories:</b>\n"
        for category in insights.strong_categories:
            result += (
                f"• {html.escape(category.name)}: {category.accuracy:.0f}% "
                f"({category.word_count} words)\n"
            )

    if insights.weak_categories:
        result += "\n🎯 <b>Needs practice:</b>\n"
        for category in insights.weak_categories:
            result += (
                f"• {html.escape(category.name)}: {category.accuracy:.0f}% "
                f"({category.word_count} words)\n"
            )

    if insights.recommendations:
        result += "\n💡 <b>Recommendations:</b>\n"
        for recommendation in insights.recommendations:
            result += f"• {html.escape(recommendation)}\n"

    return result.strip()


def format_dashboard_hint(total_words_studied: int, unlock_after: int) -> str:
    """Hint shown until the performance dashboard unlocks"""
    remaining = max(unlock_after - total_words_studied, 0)
    return (
        f"🎯 Keep going! After {remaining} more words, "
        f"you'll unlock your performance insights dashboard!"
    )


def format_quiz_question(question, number: int, total: int) -> str:
    """Format a multiple-choice question"""
    result = f"🧠 <b>Quiz {number}/{total}</b>\n\n{html.escape(question.prompt)}\n"
    for index, option in enumerate(question.options):
        result += f"\n<b>{chr(65 + index)}.</b> {html.escape(option)}"
    return result


def format_quiz_result(question, chosen_index: int, score: int, answered: int) -> str:
    """Format the feedback shown after a quiz answer"""
    if question.correct_index == chosen_index:
        verdict = "✅ Correct!"
    else:
        verdict = (
            f"❌ Not quite. The answer was "
            f"<b>{chr(65 + question.correct_index)}</b>."
        )

    result = f"{html.escape(question.prompt)}\n"
    for index, option in enumerate(question.options):
        marker = "✅" if index == question.correct_index else (
            "❌" if index == chosen_index else "▫️"
        )
        result += f"\n{marker} {html.escape(option)}"

    result += f"\n\n{verdict}\n🏅 Score: <b>{score}/{answered}</b>"
    return result


def format_analytics(summary) -> str:
    """Format the analytics summary"""
    result = "📊 <b>Statistics</b>\n\n"
    result += f"📚 Words studied: {summary.words_studied}\n"
    result += f"🔄 Total reviews: {summary.total_attempts}\n"
    result += f"✅ Overall accuracy: {summary.overall_accuracy:.1f}%\n"

    if summary.categories:
        result += "\n🗂️ <b>By category:</b>\n"
        for stats in summary.categories:
            result += (
                f"• {html.escape(stats.name)}: {stats.accuracy:.0f}% accuracy, "
                f"{stats.words_studied} words, "
                f"difficulty {stats.average_difficulty:.2f}\n"
            )

    if summary.challenging_words:
        result += "\n🔥 <b>Most challenging:</b>\n"
        for entry, perf in summary.challenging_words:
            result += (
                f"• {html.escape(entry.word)} "
                f"(difficulty {perf.difficulty_score:.2f}, {perf.attempts} reviews)\n"
            )

    if summary.mastered_words:
        result += "\n🏆 <b>Mastered:</b>\n"
        for entry, perf in summary.mastered_words:
            result += f"• {html.escape(entry.word)} ({perf.accuracy:.0%})\n"

    return result.strip()


def format_saved_words(words: list[str]) -> str:
    """Format the saved word list"""
    if not words:
        return "📭 Your word list is empty.\n\nUse /save to add words."

    result = f"📝 <b>Your words ({len(words)}):</b>\n"
    for word in words:
        result += f"• {html.escape(word)}\n"
    return result.strip()


def parse_word_list(text: str) -> list[str]:
    """Split user input on commas, semicolons and whitespace"""
    if not text:
        return []
    return [word for word in re.split(r"[,;\s]+", text.strip()) if word]


def extract_json_safely(json_str: str) -> dict[str, Any]:
    """Safely extract JSON from string"""
    if not json_str:
        return {}

    try:
        data = json.loads(json_str)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Failed to parse JSON: {json_str}")
        return {}

    return data if isinstance(data, dict) else {}


def format_json_safely(data: Any) -> str:
    """Safely format data as JSON string"""
    try:
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        logger.warning(f"Failed to serialize to JSON: {data}")
        return "{}"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length"""
    if not text or len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def get_rating_emoji(rating: Rating) -> str:
    """Get emoji for rating"""
    emojis = {Rating.EASY: "✅", Rating.MEDIUM: "➖", Rating.HARD: "❌"}
    return emojis.get(rating, "❓")


def calculate_success_rate(correct: int, total: int) -> float:
    """Calculate success rate as percentage"""
    if total == 0:
        return 0.0
    return (correct / total) * 100.0


def create_inline_keyboard_data(action: str, **kwargs) -> str:
    """Create callback data for inline keyboard with compact format"""
    # Telegram limits callback data to 64 bytes
    compact_data = {"a": action}

    key_mappings = {
        "word_id": "w",
        "rating": "r",
        "option": "o",
    }

    for key, value in kwargs.items():
        compact_data[key_mappings.get(key, key)] = value

    return format_json_safely(compact_data)


def parse_inline_keyboard_data(callback_data: str) -> dict[str, Any]:
    """Parse callback data from inline keyboard"""
    raw_data = extract_json_safely(callback_data)

    key_mappings = {
        "a": "action",
        "w": "word_id",
        "r": "rating",
        "o": "option",
    }

    return {key_mappings.get(key, key): value for key, value in raw_data.items()}


class Timer:
    """Simple timer for measuring duration"""

    def __init__(self):
        self.start_time = None
        self.end_time = None

    def start(self):
        """Start the timer"""
        self.start_time = time.time()
        self.end_time = None

    def stop(self):
        """Stop the timer"""
        if self.start_time is not None and self.end_time is None:
            self.end_time = time.time()

    def elapsed(self) -> float | None:
        """Get elapsed time in seconds"""
        if self.start_time is None:
            return None

        end = self.end_time or time.time()
        return end - self.start_time

    def get_elapsed_time(self) -> float:
        """Get elapsed time in seconds, 0 if never started"""
        return self.elapsed() or 0.0


def log_execution_time(func):
    """Decorator to log function execution time"""

    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        timer = Timer()
        timer.start()
        try:
            result = await func(*args, **kwargs)
            timer.stop()
            logger.debug(f"{func.__name__} executed in {timer.elapsed():.3f}s")
            return result
        except Exception as e:
            timer.stop()
            logger.error(f"{func.__name__} failed after {timer.elapsed():.3f}s: {e}")
            raise

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        timer = Timer()
        timer.start()
        try:
            result = func(*args, **kwargs)
            timer.stop()
            logger.debug(f"{func.__name__} executed in {timer.elapsed():.3f}s")
            return result
        except Exception as e:
            timer.stop()
            logger.error(f"{func.__name__} failed after {timer.elapsed():.3f}s: {e}")
            raise

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    else:
        return sync_wrapper
