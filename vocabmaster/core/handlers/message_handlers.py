"""
Message handlers for VocabMaster
"""

import logging

from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes

from ...utils import parse_inline_keyboard_data

logger = logging.getLogger(__name__)

STUDY_ACTIONS = {"show_answer", "rate_word", "new_session"}
QUIZ_ACTIONS = {"quiz_answer", "quiz_next"}


class MessageHandlers:
    """Handles text messages and callback queries"""

    def __init__(
        self,
        safe_reply_callback,
        save_words_callback,
        handle_study_callback,
        handle_quiz_callback,
        state_manager=None,
    ):
        self._safe_reply = safe_reply_callback
        self._save_words_for_user = save_words_callback
        self._handle_study_callback = handle_study_callback
        self._handle_quiz_callback = handle_quiz_callback
        self.state_manager = state_manager

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle text messages (words for /save)"""
        if not update.message or not update.effective_user:
            return

        text = update.message.text
        telegram_id = update.effective_user.id

        if self.state_manager and self.state_manager.is_waiting_for_words(telegram_id):
            self.state_manager.clear_state(telegram_id)

            if not text or not text.strip():
                await self._safe_reply(
                    update,
                    "❌ I didn't find any words. Use /save to try again.",
                    reply_markup=ReplyKeyboardRemove(),
                )
                return

            await self._save_words_for_user(update, text)
            return

        await self._safe_reply(
            update,
            "📝 Use /study to review flashcards, /quiz for a quiz, "
            "or /save to add your own words.\n\n/help - All commands",
            reply_markup=ReplyKeyboardRemove(),
        )

    async def handle_callback_query(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ):
        """Handle callback queries from inline keyboards"""
        if not update.callback_query or not update.effective_user:
            return

        query = update.callback_query
        await query.answer()

        data = parse_inline_keyboard_data(query.data or "")
        action = data.get("action")

        if action in STUDY_ACTIONS:
            await self._handle_study_callback(query, data)
        elif action in QUIZ_ACTIONS:
            await self._handle_quiz_callback(query, data)
        else:
            logger.warning(f"Unhandled callback query: {query.data}")
