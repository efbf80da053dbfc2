"""
Unified database manager that coordinates all repositories
"""

import logging

from ...ledger import PerformanceLedger
from .connection import DatabaseConnection
from .repositories.ledger_repository import LedgerRepository
from .repositories.saved_words_repository import SavedWordsRepository
from .repositories.storage_repository import StorageRepository

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Unified database manager that coordinates all repositories"""

    def __init__(self, db_path: str | None = None):
        self.db_connection = DatabaseConnection(db_path)
        self.storage_repo = StorageRepository(self.db_connection)
        self.ledger_repo = LedgerRepository(self.storage_repo)
        self.saved_words_repo = SavedWordsRepository(self.storage_repo)

    def init_database(self) -> None:
        """Initialize database tables"""
        self.db_connection.init_database()

    # Ledger methods
    def load_ledger(self, owner_id: int) -> PerformanceLedger:
        """Load a learner's performance ledger"""
        return self.ledger_repo.load_ledger(owner_id)

    def save_ledger(self, owner_id: int, ledger: PerformanceLedger) -> None:
        """Persist a learner's performance ledger"""
        self.ledger_repo.save_ledger(owner_id, ledger)

    # Saved word methods
    def get_saved_words(self, owner_id: int) -> list[str]:
        return self.saved_words_repo.get_words(owner_id)

    def add_saved_words(self, owner_id: int, words: list[str]) -> list[str]:
        """Add words to the saved list, returning the newly added ones"""
        return self.saved_words_repo.add_words(owner_id, words)

    def remove_saved_word(self, owner_id: int, word: str) -> bool:
        return self.saved_words_repo.remove_word(owner_id, word)

    def clear_saved_words(self, owner_id: int) -> None:
        self.saved_words_repo.clear_all(owner_id)


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager(db_path: str | None = None) -> DatabaseManager:
    """Get global database manager instance"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(db_path)
    return _db_manager
