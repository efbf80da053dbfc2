"""
Quiz session management for VocabMaster
"""

import asyncio
import logging
from datetime import datetime

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update

from ...config import Settings, get_settings
from ...models import VocabularyEntry
from ...quiz import QuizGenerator, QuizQuestion
from ...utils import (
    calculate_success_rate,
    create_inline_keyboard_data,
    format_quiz_question,
    format_quiz_result,
    parse_inline_keyboard_data,
    truncate_text,
)

logger = logging.getLogger(__name__)

QUIZ_EXPIRED_MESSAGE = "❌ Quiz expired. Start a new one with /quiz"
NOT_ENOUGH_WORDS_MESSAGE = "📭 At least 4 words are needed for a quiz."


class QuizSession:
    """A run of multiple-choice questions with a running score"""

    def __init__(self, generator: QuizGenerator, question_limit: int = 20):
        self.generator = generator
        self.question_limit = question_limit
        self.current: QuizQuestion | None = None
        self.asked = 0
        self.answered = 0
        self.score = 0
        self.created_at = datetime.now()

    def next_question(self) -> QuizQuestion | None:
        """Generate the next question, None when the quiz is over"""
        if self.asked >= self.question_limit:
            self.current = None
            return None

        self.current = self.generator.generate()
        if self.current is not None:
            self.asked += 1
        return self.current

    def answer(self, option_index: int) -> bool | None:
        """Score an answer for the current question, None if there is nothing to answer"""
        question = self.current
        if question is None or not 0 <= option_index < len(question.options):
            return None

        correct = question.is_correct(question.options[option_index])
        self.answered += 1
        if correct:
            self.score += 1
        return correct

    def is_finished(self) -> bool:
        return self.asked >= self.question_limit


class QuizManager:
    """Manages user quiz sessions"""

    def __init__(
        self,
        safe_reply_callback,
        safe_edit_callback,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self._safe_reply = safe_reply_callback
        self._safe_edit = safe_edit_callback
        self.user_quizzes: dict[int, QuizSession] = {}

    async def start_quiz(
        self, update: Update, catalog: list[VocabularyEntry]
    ) -> QuizSession | None:
        """Start a quiz and show the first question"""
        user_id = update.effective_user.id

        quiz = QuizSession(QuizGenerator(catalog), self.settings.session_length)
        question = quiz.next_question()
        if question is None:
            await self._safe_reply(update, NOT_ENOUGH_WORDS_MESSAGE)
            return None

        self.user_quizzes[user_id] = quiz
        logger.info(f"Started quiz for user {user_id}")
        await self._safe_reply(
            update,
            format_quiz_question(question, quiz.asked, quiz.question_limit),
            reply_markup=self._options_keyboard(question),
            parse_mode="HTML",
        )
        return quiz

    def _options_keyboard(self, question: QuizQuestion) -> InlineKeyboardMarkup:
        keyboard = []
        for index, option in enumerate(question.options):
            callback_data = create_inline_keyboard_data(action="quiz_answer", option=index)
            keyboard.append(
                [
                    InlineKeyboardButton(
                        f"{chr(65 + index)}. {truncate_text(option, 60)}",
                        callback_data=callback_data,
                    )
                ]
            )
        return InlineKeyboardMarkup(keyboard)

    def _next_keyboard(self) -> InlineKeyboardMarkup:
        callback_data = create_inline_keyboard_data(action="quiz_next")
        return InlineKeyboardMarkup(
            [[InlineKeyboardButton("➡️ Next question", callback_data=callback_data)]]
        )

    async def handle_answer(self, query, data: dict):
        """Handle a chosen option"""
        quiz = self.user_quizzes.get(query.from_user.id)
        if not quiz:
            await self._safe_edit(query, QUIZ_EXPIRED_MESSAGE)
            return

        question = quiz.current
        option = data.get("option")
        if question is None or not isinstance(option, int):
            return

        if quiz.answer(option) is None:
            logger.warning(f"Quiz option out of range: {option}")
            return

        quiz.current = None
        await asyncio.sleep(self.settings.advance_delay_seconds)

        text = format_quiz_result(question, option, quiz.score, quiz.answered)
        if quiz.is_finished():
            await self._finish_quiz(query, quiz, text)
            return

        await self._safe_edit(
            query, text, reply_markup=self._next_keyboard(), parse_mode="HTML"
        )

    async def handle_next(self, query, data: dict):
        """Show the next question"""
        quiz = self.user_quizzes.get(query.from_user.id)
        if not quiz:
            await self._safe_edit(query, QUIZ_EXPIRED_MESSAGE)
            return

        if quiz.current is not None:
            return

        question = quiz.next_question()
        if question is None:
            await self._finish_quiz(query, quiz, "")
            return

        await self._safe_edit(
            query,
            format_quiz_question(question, quiz.asked, quiz.question_limit),
            reply_markup=self._options_keyboard(question),
            parse_mode="HTML",
        )

    async def _finish_quiz(self, query, quiz: QuizSession, prefix: str):
        accuracy = calculate_success_rate(quiz.score, quiz.answered)
        text = (
            f"🏁 <b>Quiz complete!</b>\n"
            f"• Score: <b>{quiz.score}/{quiz.answered}</b>\n"
            f"• Accuracy: <b>{accuracy:.1f}%</b>\n\n"
            f"🎯 Use /quiz to try again or /study to review cards."
        )
        if prefix:
            text = f"{prefix}\n\n{text}"

        self.user_quizzes.pop(query.from_user.id, None)
        await self._safe_edit(query, text, parse_mode="HTML")

    async def handle_quiz_callback(self, query, data: dict | None = None):
        """Handle quiz-related callback queries"""
        data = data if data is not None else parse_inline_keyboard_data(query.data)
        action = data.get("action")

        if action == "quiz_answer":
            await self.handle_answer(query, data)
        elif action == "quiz_next":
            await self.handle_next(query, data)
        else:
            logger.warning(f"Unknown quiz callback action: {action}")

    def get_quiz(self, user_id: int) -> QuizSession | None:
        return self.user_quizzes.get(user_id)

    def end_quiz(self, user_id: int) -> QuizSession | None:
        return self.user_quizzes.pop(user_id, None)

    def cleanup_expired_quizzes(self, max_age_hours: int = 24) -> int:
        """Drop abandoned quizzes older than max_age_hours"""
        cutoff = datetime.now()
        expired = [
            user_id
            for user_id, quiz in self.user_quizzes.items()
            if (cutoff - quiz.created_at).total_seconds() / 3600 > max_age_hours
        ]
        for user_id in expired:
            del self.user_quizzes[user_id]
            logger.info(f"Cleaned up expired quiz for user {user_id}")
        return len(expired)
