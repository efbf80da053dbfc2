"""
Telegram bot handler wiring commands, callbacks and sessions together
"""

import asyncio
import html
import logging
from functools import wraps

from telegram import BotCommand, Update
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from .catalog import CatalogService
from .config import get_settings
from .core.database.database_manager import get_db_manager
from .core.handlers.command_handlers import CommandHandlers
from .core.handlers.message_handlers import MessageHandlers
from .core.session.quiz_manager import QuizManager
from .core.session.session_manager import SessionManager
from .core.state.user_state_manager import UserStateManager
from .dictionary_client import get_dictionary_client
from .insights import InsightsAggregator
from .utils import parse_word_list

logger = logging.getLogger(__name__)

COMMANDS = [
    ("start", "start_command"),
    ("help", "help_command"),
    ("study", "study_command"),
    ("quiz", "quiz_command"),
    ("insights", "insights_command"),
    ("stats", "stats_command"),
    ("save", "save_command"),
    ("words", "words_command"),
    ("remove", "remove_command"),
    ("clear", "clear_command"),
    ("reload", "reload_command"),
]


class BotHandler:
    """Main Telegram bot handler"""

    def __init__(self, settings=None, db_manager=None, catalog_service=None):
        self.settings = settings or get_settings()
        self.db_manager = db_manager or get_db_manager()
        self.catalog_service = catalog_service or CatalogService(
            get_dictionary_client(self.settings.catalog_source)
        )
        self.insights = InsightsAggregator.from_settings(self.settings)
        self.state_manager = UserStateManager(state_timeout_minutes=10)

        self.application = None
        self._cleanup_task: asyncio.Task | None = None

        self.session_manager = SessionManager(
            db_manager=self.db_manager,
            safe_reply_callback=self._safe_reply,
            safe_edit_callback=self._safe_edit,
            settings=self.settings,
            insights=self.insights,
        )

        self.quiz_manager = QuizManager(
            safe_reply_callback=self._safe_reply,
            safe_edit_callback=self._safe_edit,
            settings=self.settings,
        )

        self.command_handlers = CommandHandlers(
            db_manager=self.db_manager,
            catalog_service=self.catalog_service,
            safe_reply_callback=self._safe_reply,
            save_words_callback=self._save_words_for_user,
            session_manager=self.session_manager,
            quiz_manager=self.quiz_manager,
            state_manager=self.state_manager,
            insights=self.insights,
            settings=self.settings,
        )

        self.message_handlers = MessageHandlers(
            safe_reply_callback=self._safe_reply,
            save_words_callback=self._save_words_for_user,
            handle_study_callback=self.session_manager.handle_study_callback,
            handle_quiz_callback=self.quiz_manager.handle_quiz_callback,
            state_manager=self.state_manager,
        )

    def _is_user_authorized(self, user_id: int) -> bool:
        """Check if user is authorized to use the bot; an empty list allows everyone"""
        allowed = self.settings.allowed_users_list
        if not allowed:
            return True
        return user_id in allowed

    async def _check_authorization(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> bool:
        """Check if user is authorized and send unauthorized message if not"""
        user_id = update.effective_user.id

        if not self._is_user_authorized(user_id):
            await self._safe_reply(
                update,
                "❌ You don't have access to this bot. Please contact the administrator.",
            )
            logger.warning(f"Unauthorized access attempt from user {user_id}")
            return False

        return True

    def require_authorization(self, func):
        """Decorator to require authorization for handler functions"""

        @wraps(func)
        async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
            if not await self._check_authorization(update, context):
                return
            return await func(update, context)

        return wrapper

    def _build_application(self) -> Application:
        if not self.settings.telegram_bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN is not set")

        return (
            Application.builder()
            .token(self.settings.telegram_bot_token)
            .read_timeout(30)
            .write_timeout(30)
            .connect_timeout(30)
            .pool_timeout(30)
            .build()
        )

    async def start(self):
        """Start the bot and poll until stopped"""
        logger.info("Starting VocabMaster bot...")

        self.db_manager.init_database()
        self.application = self._build_application()
        self._add_handlers()

        await self.state_manager.start()
        self._cleanup_task = asyncio.create_task(self._periodic_session_cleanup())
        try:
            async with self.application:
                await self.setup_bot_menu(self.application)
                await self.application.start()
                await self.application.updater.start_polling(
                    poll_interval=self.settings.polling_interval,
                    timeout=10,
                    bootstrap_retries=3,
                )
                logger.info("Bot started successfully!")
                try:
                    await asyncio.Event().wait()
                finally:
                    await self.application.updater.stop()
                    await self.application.stop()
        finally:
            await self._stop_session_cleanup()
            await self.state_manager.stop()

    def cleanup_expired_sessions(self) -> int:
        """Drop study sessions and quizzes older than session_max_age_hours"""
        max_age = self.settings.session_max_age_hours
        removed = self.session_manager.cleanup_expired_sessions(max_age_hours=max_age)
        removed += self.quiz_manager.cleanup_expired_quizzes(max_age_hours=max_age)
        return removed

    async def _periodic_session_cleanup(self, interval_seconds: float = 3600):
        while True:
            await asyncio.sleep(interval_seconds)
            removed = self.cleanup_expired_sessions()
            if removed:
                logger.info(f"Removed {removed} expired sessions")

    async def _stop_session_cleanup(self):
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                logger.debug("Session cleanup task cancelled")
            self._cleanup_task = None

    def _add_handlers(self):
        """Add command and message handlers"""
        app = self.application

        for command, method_name in COMMANDS:
            handler = getattr(self.command_handlers, method_name)
            app.add_handler(CommandHandler(command, self.require_authorization(handler)))

        app.add_handler(
            MessageHandler(
                filters.TEXT & ~filters.COMMAND,
                self.require_authorization(self.message_handlers.handle_message),
            )
        )

        app.add_handler(
            CallbackQueryHandler(
                self.require_authorization(self.message_handlers.handle_callback_query)
            )
        )

        app.add_error_handler(self.error_handler)

    async def setup_bot_menu(self, application):
        """Setup bot menu with commands for better UX"""
        commands = [
            BotCommand("study", "🎯 Start a flashcard session"),
            BotCommand("quiz", "🧠 Multiple-choice quiz"),
            BotCommand("insights", "📈 Strong and weak categories"),
            BotCommand("stats", "📊 Detailed statistics"),
            BotCommand("save", "📝 Save words to study"),
            BotCommand("words", "📚 Show saved words"),
            BotCommand("reload", "🔄 Reload vocabulary"),
            BotCommand("help", "❓ Command reference"),
        ]

        try:
            await application.bot.set_my_commands(commands)
            logger.info("Bot menu commands set successfully")
        except TelegramError as e:
            logger.error(f"Failed to set bot menu commands: {e}")

    async def _save_words_for_user(self, update: Update, text: str):
        """Add words from user input to the saved list"""
        user_id = update.effective_user.id
        words = parse_word_list(text)

        if not words:
            await self._safe_reply(update, "❌ I didn't find any words to save.")
            return

        added = self.db_manager.add_saved_words(user_id, words)
        if added:
            self.catalog_service.invalidate(user_id)

        skipped = len(words) - len(added)
        message = f"✅ Saved <b>{len(added)}</b> words"
        if added:
            message += f": {html.escape(', '.join(added))}"
        if skipped:
            message += f"\n↩️ Already saved or duplicated: <b>{skipped}</b>"
        if self.settings.catalog_source == "sample":
            message += (
                "\n\nℹ️ The built-in sample vocabulary is in use, so saved words "
                "will be studied once a dictionary source is configured."
            )

        await self._safe_reply(update, message, parse_mode="HTML")

    async def _safe_reply(self, update_or_query, text: str, **kwargs):
        """Safely send a reply message"""
        try:
            if hasattr(update_or_query, "message"):
                message = await update_or_query.message.reply_text(text, **kwargs)
            else:
                message = await update_or_query.reply_text(text, **kwargs)
            return message
        except TelegramError as e:
            logger.error(f"Error sending reply: {e}")
            logger.error(f"Failed text: {text[:100]}...")
            return None

    async def _safe_edit(self, query, text: str, **kwargs):
        """Safely edit a message"""
        try:
            return await query.edit_message_text(text, **kwargs)
        except TelegramError as e:
            logger.error(f"Error editing message: {e}")
            return None

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        """Handle errors"""
        logger.error(f"Update {update} caused error {context.error}")


