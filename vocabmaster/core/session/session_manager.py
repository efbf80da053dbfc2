"""
Session management for VocabMaster
"""

import asyncio
import logging
from datetime import datetime

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update

from ...config import Settings, get_settings
from ...database import DatabaseManager
from ...insights import InsightsAggregator
from ...ledger import PerformanceLedger
from ...models import Rating, VocabularyEntry
from ...spaced_repetition import get_scorer
from ...utils import (
    create_inline_keyboard_data,
    format_card_answer,
    format_dashboard_hint,
    format_flashcard,
    format_insights,
    format_session_summary,
    get_rating_emoji,
    parse_inline_keyboard_data,
)
from .picker import SessionPicker
from .study_session import StudySession

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "❌ Session expired. Start a new one with /study"


class SessionManager:
    """Manages user study sessions"""

    def __init__(
        self,
        db_manager: DatabaseManager,
        safe_reply_callback,
        safe_edit_callback,
        settings: Settings | None = None,
        insights: InsightsAggregator | None = None,
    ):
        self.db_manager = db_manager
        self.settings = settings or get_settings()
        self.insights = insights or InsightsAggregator.from_settings(self.settings)
        self._safe_reply = safe_reply_callback
        self._safe_edit = safe_edit_callback
        self.user_sessions: dict[int, StudySession] = {}

    def _create_picker(self) -> SessionPicker:
        return SessionPicker(
            scorer=get_scorer(),
            session_length=self.settings.session_length,
            history_window=self.settings.history_window,
            top_k=self.settings.top_k,
        )

    async def start_study_session(
        self,
        update: Update,
        catalog: list[VocabularyEntry],
        ledger: PerformanceLedger,
    ) -> StudySession | None:
        """Start a new study session and show the first card"""
        user_id = update.effective_user.id

        session = StudySession(
            catalog,
            ledger,
            picker=self._create_picker(),
            save_callback=lambda updated: self.db_manager.save_ledger(user_id, updated),
        )
        self.user_sessions[user_id] = session

        entry = session.start()
        if entry is None:
            del self.user_sessions[user_id]
            await self._safe_reply(update, "📭 No words available to study right now.")
            return None

        logger.info(f"Started study session for user {user_id} ({len(catalog)} words)")
        await self._safe_reply(
            update,
            self._card_text(session, entry),
            reply_markup=self._show_answer_keyboard(entry),
            parse_mode="HTML",
        )
        return session

    def _card_text(self, session: StudySession, entry: VocabularyEntry) -> str:
        return format_flashcard(entry, session.state.answered, session.session_length)

    def _show_answer_keyboard(self, entry: VocabularyEntry) -> InlineKeyboardMarkup:
        keyboard_data = create_inline_keyboard_data(action="show_answer", word_id=entry.id)
        return InlineKeyboardMarkup(
            [[InlineKeyboardButton("🔍 Show answer", callback_data=keyboard_data)]]
        )

    def _rating_keyboard(self, entry: VocabularyEntry) -> InlineKeyboardMarkup:
        rating_buttons = []
        for rating in Rating:
            callback_data = create_inline_keyboard_data(
                action="rate_word",
                word_id=entry.id,
                rating=rating.value[0],
            )
            rating_buttons.append(
                InlineKeyboardButton(
                    f"{get_rating_emoji(rating)} {rating.value.capitalize()}",
                    callback_data=callback_data,
                )
            )
        return InlineKeyboardMarkup([rating_buttons])

    def _new_session_keyboard(self) -> InlineKeyboardMarkup:
        keyboard_data = create_inline_keyboard_data(action="new_session")
        return InlineKeyboardMarkup(
            [[InlineKeyboardButton("🔄 New session", callback_data=keyboard_data)]]
        )

    def _active_entry(self, session: StudySession, data: dict) -> VocabularyEntry | None:
        """Current card, or None when the callback refers to a stale card"""
        entry = session.current
        if entry is None or session.is_finished():
            return None
        if data.get("word_id") != entry.id:
            logger.debug(
                f"Ignoring stale callback for '{data.get('word_id')}', current is '{entry.id}'"
            )
            return None
        return entry

    async def handle_show_answer(self, query, data: dict):
        """Handle showing the answer to a flashcard"""
        session = self.user_sessions.get(query.from_user.id)
        if not session:
            await self._safe_edit(query, SESSION_EXPIRED_MESSAGE)
            return

        entry = self._active_entry(session, data)
        if entry is None:
            return

        await self._safe_edit(
            query,
            format_card_answer(entry),
            reply_markup=self._rating_keyboard(entry),
            parse_mode="HTML",
        )

    async def handle_word_rating(self, query, data: dict):
        """Handle word rating"""
        user_id = query.from_user.id
        session = self.user_sessions.get(user_id)

        if not session:
            await self._safe_edit(query, SESSION_EXPIRED_MESSAGE)
            return

        if self._active_entry(session, data) is None:
            return

        try:
            rating = Rating.from_value(data.get("rating"))
        except ValueError:
            logger.error(f"Invalid rating in callback data: {data}")
            return

        outcome = session.record_response(rating)
        if outcome is None:
            return

        logger.debug(
            f"User {user_id} rated '{outcome.performance.word_id}' {rating.value}, "
            f"difficulty now {outcome.performance.difficulty_score:.2f}"
        )

        await asyncio.sleep(self.settings.advance_delay_seconds)

        if outcome.next_entry is None:
            await self._finish_session(query, session)
        else:
            await self._safe_edit(
                query,
                self._card_text(session, outcome.next_entry),
                reply_markup=self._show_answer_keyboard(outcome.next_entry),
                parse_mode="HTML",
            )

    def _summary_text(self, session: StudySession) -> str:
        state = session.state
        text = format_session_summary(
            state.answered,
            state.easy,
            state.medium,
            state.hard,
            session.timer.get_elapsed_time(),
        )

        total = session.ledger.total_words_studied
        unlock_after = self.settings.dashboard_after_words
        if total >= unlock_after:
            insights = self.insights.get_performance_insights(session.ledger)
            text += "\n\n" + format_insights(insights, total)
        else:
            text += "\n\n" + format_dashboard_hint(total, unlock_after)
        return text

    async def _finish_session(self, query, session: StudySession):
        """Finish the study session from a callback query"""
        session.timer.stop()
        logger.info(
            f"Study session finished: {session.state.answered} answered, "
            f"accuracy {session.accuracy():.1f}%"
        )
        await self._safe_edit(
            query,
            self._summary_text(session),
            reply_markup=self._new_session_keyboard(),
            parse_mode="HTML",
        )

    async def handle_new_session(self, query, data: dict):
        """Restart the finished session with the same catalog"""
        session = self.user_sessions.get(query.from_user.id)
        if not session:
            await self._safe_edit(query, SESSION_EXPIRED_MESSAGE)
            return

        entry = session.start()
        if entry is None:
            await self._safe_edit(query, "📭 No words available to study right now.")
            return

        await self._safe_edit(
            query,
            self._card_text(session, entry),
            reply_markup=self._show_answer_keyboard(entry),
            parse_mode="HTML",
        )

    async def handle_study_callback(self, query, data: dict | None = None):
        """Handle study-related callback queries"""
        data = data if data is not None else parse_inline_keyboard_data(query.data)
        action = data.get("action")

        if action == "show_answer":
            await self.handle_show_answer(query, data)
        elif action == "rate_word":
            await self.handle_word_rating(query, data)
        elif action == "new_session":
            await self.handle_new_session(query, data)
        else:
            logger.warning(f"Unknown study callback action: {action}")

    def get_session(self, user_id: int) -> StudySession | None:
        """Get active session for user"""
        return self.user_sessions.get(user_id)

    def end_session(self, user_id: int) -> StudySession | None:
        """Drop the user's session, returning it if there was one"""
        session = self.user_sessions.pop(user_id, None)
        if session:
            session.timer.stop()
        return session

    def cleanup_expired_sessions(self, max_age_hours: int = 24) -> int:
        """Clean up expired sessions"""
        current_time = datetime.now()
        expired_sessions = []

        for user_id, session in self.user_sessions.items():
            age = (current_time - session.created_at).total_seconds() / 3600
            if age > max_age_hours:
                expired_sessions.append(user_id)

        for user_id in expired_sessions:
            del self.user_sessions[user_id]
            logger.info(f"Cleaned up expired session for user {user_id}")
        return len(expired_sessions)
