"""
Command handlers for VocabMaster
"""

import logging

from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes

from ...catalog import CatalogService, CatalogState
from ...config import Settings, get_settings
from ...database import DatabaseManager
from ...insights import InsightsAggregator
from ...utils import (
    format_analytics,
    format_dashboard_hint,
    format_insights,
    format_saved_words,
)
from ..state.user_state_manager import UserState

logger = logging.getLogger(__name__)


class CommandHandlers:
    """Handles all bot commands"""

    def __init__(
        self,
        db_manager: DatabaseManager,
        catalog_service: CatalogService,
        safe_reply_callback,
        save_words_callback,
        session_manager,
        quiz_manager,
        state_manager=None,
        insights: InsightsAggregator | None = None,
        settings: Settings | None = None,
    ):
        self.db_manager = db_manager
        self.catalog_service = catalog_service
        self._safe_reply = safe_reply_callback
        self._save_words_for_user = save_words_callback
        self.session_manager = session_manager
        self.quiz_manager = quiz_manager
        self.state_manager = state_manager
        self.settings = settings or get_settings()
        self.insights = insights or InsightsAggregator.from_settings(self.settings)

    async def _load_catalog(self, update: Update) -> CatalogState:
        """Load the user's catalog, reporting a load failure"""
        user_id = update.effective_user.id
        saved_words = self.db_manager.get_saved_words(user_id)
        state = await self.catalog_service.get_catalog(user_id, saved_words)
        if not state.ok:
            await self._safe_reply(update, f"⚠️ {state.error}")
        return state

    async def start_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /start command"""
        if not update.effective_user:
            return

        user = update.effective_user
        welcome_message = f"""🎉 Hi, {user.first_name}!

Welcome to <b>VocabMaster</b> 🧠

I help you build your English vocabulary with adaptive flashcards: words you
find hard or haven't seen in a while come back more often.

📚 <b>Main commands:</b>
/study - Start a flashcard session
/quiz - Multiple-choice quiz
/insights - Your strong and weak categories
/help - All commands"""

        await self._safe_reply(
            update,
            welcome_message,
            parse_mode="HTML",
            reply_markup=ReplyKeyboardRemove(),
        )

    async def help_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /help command"""
        if not update.effective_user:
            return

        help_message = """📖 <b>VocabMaster commands</b>

📚 <b>Learning:</b>
/study - Flashcard session (up to 20 cards)
/quiz - Multiple-choice quiz

📊 <b>Progress:</b>
/insights - Strong and weak categories with recommendations
/stats - Detailed statistics

📝 <b>Your words:</b>
/save &lt;words&gt; - Save words to study (or send them in the next message)
/words - Show your saved words
/remove &lt;word&gt; - Remove a saved word
/clear - Remove all saved words
/reload - Reload the vocabulary

🎯 <b>Ratings:</b>
✅ Easy - I knew it (counts as correct)
➖ Medium - I half knew it
❌ Hard - I didn't know it

Harder and older words are shown more often."""

        await self._safe_reply(
            update, help_message, parse_mode="HTML", reply_markup=ReplyKeyboardRemove()
        )

    async def study_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /study command"""
        if not update.effective_user:
            return

        user_id = update.effective_user.id
        self.quiz_manager.end_quiz(user_id)

        catalog_state = await self._load_catalog(update)
        ledger = self.db_manager.load_ledger(user_id)

        await self.session_manager.start_study_session(
            update, catalog_state.entries, ledger
        )

    async def quiz_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /quiz command"""
        if not update.effective_user:
            return

        user_id = update.effective_user.id
        self.session_manager.end_session(user_id)

        catalog_state = await self._load_catalog(update)
        await self.quiz_manager.start_quiz(update, catalog_state.entries)

    async def insights_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /insights command"""
        if not update.effective_user:
            return

        ledger = self.db_manager.load_ledger(update.effective_user.id)
        insights = self.insights.get_performance_insights(ledger)

        message = format_insights(insights, ledger.total_words_studied)
        unlock_after = self.settings.dashboard_after_words
        if ledger.total_words_studied < unlock_after:
            message = (
                format_dashboard_hint(ledger.total_words_studied, unlock_after)
                + "\n\n"
                + message
            )

        await self._safe_reply(update, message, parse_mode="HTML")

    async def stats_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /stats command"""
        if not update.effective_user:
            return

        catalog_state = await self._load_catalog(update)
        ledger = self.db_manager.load_ledger(update.effective_user.id)
        summary = self.insights.get_analytics(ledger, catalog_state.entries)

        await self._safe_reply(update, format_analytics(summary), parse_mode="HTML")

    async def save_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /save command"""
        if not update.effective_user:
            return

        if context.args:
            await self._save_words_for_user(update, " ".join(context.args))
            return

        if self.state_manager:
            self.state_manager.set_state(
                update.effective_user.id, UserState.WAITING_FOR_WORDS_TO_SAVE
            )
            await self._safe_reply(
                update,
                "📝 Send me the words you want to study, separated by commas or spaces.\n\n"
                "For example: ubiquitous, ephemeral, laconic\n\n"
                "🕒 You have 10 minutes to send them.",
                reply_markup=ReplyKeyboardRemove(),
            )
        else:
            await self._safe_reply(
                update,
                "📝 Please list the words to save.\n\nExample: /save ubiquitous ephemeral",
                reply_markup=ReplyKeyboardRemove(),
            )

    async def words_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /words command"""
        if not update.effective_user:
            return

        words = self.db_manager.get_saved_words(update.effective_user.id)
        await self._safe_reply(update, format_saved_words(words), parse_mode="HTML")

    async def remove_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /remove command"""
        if not update.effective_user:
            return

        if not context.args:
            await self._safe_reply(update, "Usage: /remove &lt;word&gt;", parse_mode="HTML")
            return

        user_id = update.effective_user.id
        word = context.args[0]
        if self.db_manager.remove_saved_word(user_id, word):
            self.catalog_service.invalidate(user_id)
            await self._safe_reply(update, f"🗑️ Removed '{word.strip().lower()}'.")
        else:
            await self._safe_reply(update, f"❓ '{word}' is not in your word list.")

    async def clear_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /clear command"""
        if not update.effective_user:
            return

        user_id = update.effective_user.id
        self.db_manager.clear_saved_words(user_id)
        self.catalog_service.invalidate(user_id)
        await self._safe_reply(update, "🧹 Your word list has been cleared.")

    async def reload_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /reload command"""
        if not update.effective_user:
            return

        user_id = update.effective_user.id
        self.catalog_service.invalidate(user_id)
        await self._safe_reply(update, "🔄 Reloading vocabulary...")

        catalog_state = await self._load_catalog(update)
        if catalog_state.ok:
            logger.info(f"Reloaded catalog for user {user_id}: {len(catalog_state.entries)} words")
            await self._safe_reply(
                update,
                f"✅ Loaded {len(catalog_state.entries)} words. Use /study to begin.",
            )
