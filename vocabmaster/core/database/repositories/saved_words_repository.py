"""
Saved word list repository
"""

import logging

from .storage_repository import StorageRepository

logger = logging.getLogger(__name__)

SAVED_WORDS_STORAGE_KEY = "user-saved-vocab-list"


class SavedWordsRepository:
    """User-entered plain-text words, lower-cased and de-duplicated"""

    def __init__(self, storage: StorageRepository):
        self.storage = storage

    def get_words(self, owner_id: int) -> list[str]:
        """Get the saved words in insertion order"""
        data = self.storage.get_value(owner_id, SAVED_WORDS_STORAGE_KEY)
        if not isinstance(data, list):
            if data is not None:
                logger.warning(f"Malformed saved word list for owner {owner_id}")
            return []
        return [word for word in data if isinstance(word, str) and word]

    def add_words(self, owner_id: int, words: list[str]) -> list[str]:
        """
        Add words to the saved list

        Args:
            owner_id: Owner of the list
            words: Raw user input words

        Returns:
            The words that were actually added
        """
        current = self.get_words(owner_id)
        known = set(current)

        added = []
        for word in words:
            normalized = word.strip().lower()
            if not normalized or normalized in known:
                continue
            known.add(normalized)
            added.append(normalized)

        if added:
            self.storage.set_value(owner_id, SAVED_WORDS_STORAGE_KEY, current + added)
            logger.info(f"Saved {len(added)} words for owner {owner_id}")

        return added

    def remove_word(self, owner_id: int, word: str) -> bool:
        """Remove a word, returning whether it was present"""
        current = self.get_words(owner_id)
        target = word.strip().lower()
        if target not in current:
            return False

        self.storage.set_value(
            owner_id, SAVED_WORDS_STORAGE_KEY, [w for w in current if w != target]
        )
        return True

    def clear_all(self, owner_id: int) -> None:
        self.storage.set_value(owner_id, SAVED_WORDS_STORAGE_KEY, [])
