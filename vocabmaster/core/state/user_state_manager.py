"""
User state management for bot interactions
"""

import asyncio
import logging
from datetime import datetime, timedelta
from enum import Enum

logger = logging.getLogger(__name__)


class UserState(Enum):
    """Available user states"""

    IDLE = "idle"
    WAITING_FOR_WORDS_TO_SAVE = "waiting_for_words_to_save"


class UserStateInfo:
    """Information about user state"""

    def __init__(self, state: UserState, timestamp: datetime | None = None, data: dict | None = None):
        self.state = state
        self.timestamp = timestamp or datetime.now()
        self.data = data or {}


class UserStateManager:
    """Tracks multi-step conversations such as /save without arguments"""

    def __init__(self, state_timeout_minutes: int = 10):
        self.user_states: dict[int, UserStateInfo] = {}
        self.state_timeout_minutes = state_timeout_minutes
        self._cleanup_task: asyncio.Task | None = None

    async def start(self):
        """Start the periodic cleanup task"""
        logger.info("Starting UserStateManager")
        self._cleanup_task = asyncio.create_task(self._periodic_cleanup())

    async def stop(self):
        """Stop the periodic cleanup task"""
        logger.info("Stopping UserStateManager")
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                logger.debug("State cleanup task cancelled")
            self._cleanup_task = None

    def set_state(self, telegram_id: int, state: UserState, data: dict | None = None):
        self.user_states[telegram_id] = UserStateInfo(state, data=data)
        logger.debug(f"Set state for user {telegram_id}: {state.value}")

    def get_state(self, telegram_id: int) -> UserState:
        """Get user state, expiring stale ones"""
        state_info = self.user_states.get(telegram_id)
        if state_info is None:
            return UserState.IDLE

        if self._is_state_expired(state_info):
            self.clear_state(telegram_id)
            return UserState.IDLE

        return state_info.state

    def clear_state(self, telegram_id: int):
        if telegram_id in self.user_states:
            old_state = self.user_states.pop(telegram_id).state
            logger.debug(f"Cleared state for user {telegram_id} (was: {old_state.value})")

    def is_waiting_for_words(self, telegram_id: int) -> bool:
        return self.get_state(telegram_id) == UserState.WAITING_FOR_WORDS_TO_SAVE

    def _is_state_expired(self, state_info: UserStateInfo, now: datetime | None = None) -> bool:
        if state_info.state == UserState.IDLE:
            return False

        timeout = timedelta(minutes=self.state_timeout_minutes)
        return (now or datetime.now()) - state_info.timestamp > timeout

    def cleanup_expired(self) -> int:
        """Drop expired states, returning how many were removed"""
        expired_users = [
            telegram_id
            for telegram_id, state_info in self.user_states.items()
            if self._is_state_expired(state_info)
        ]
        for telegram_id in expired_users:
            logger.info(f"Cleaning up expired state for user {telegram_id}")
            self.clear_state(telegram_id)
        return len(expired_users)

    async def _periodic_cleanup(self):
        while True:
            await asyncio.sleep(60)  # Check every minute
            self.cleanup_expired()
