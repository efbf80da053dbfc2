"""
Ledger repository: persists the performance ledger as a single record
"""

import logging

from ....ledger import PerformanceLedger
from .storage_repository import StorageRepository

logger = logging.getLogger(__name__)

LEDGER_STORAGE_KEY = "vocabulary-performance"


class LedgerRepository:
    """Loads and saves each learner's performance ledger"""

    def __init__(self, storage: StorageRepository):
        self.storage = storage

    def load_ledger(self, owner_id: int) -> PerformanceLedger:
        """Load the ledger, falling back to an empty one"""
        data = self.storage.get_value(owner_id, LEDGER_STORAGE_KEY)
        ledger = PerformanceLedger.from_dict(data)
        logger.debug(
            f"Loaded ledger for owner {owner_id}: {len(ledger)} words, "
            f"{ledger.total_words_studied} studied"
        )
        return ledger

    def save_ledger(self, owner_id: int, ledger: PerformanceLedger) -> None:
        self.storage.set_value(owner_id, LEDGER_STORAGE_KEY, ledger.to_dict())
