"""
Key/value storage repository: one JSON record per owner and key
"""

import json
import logging
from datetime import datetime
from typing import Any

from ..connection import DatabaseConnection

logger = logging.getLogger(__name__)


class StorageRepository:
    """Repository for JSON records stored under a key"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def get_value(self, owner_id: int, key: str) -> Any | None:
        """Get a stored value, None when absent or unreadable"""
        with self.db_connection.get_connection() as conn:
            cursor = conn.execute(
                "SELECT value FROM user_storage WHERE owner_id = ? AND storage_key = ?",
                (owner_id, key),
            )
            row = cursor.fetchone()

        if not row:
            return None

        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Corrupt record '{key}' for owner {owner_id}, ignoring it")
            return None

    def set_value(self, owner_id: int, key: str, value: Any) -> None:
        """Store a value, replacing any previous record"""
        payload = json.dumps(value, ensure_ascii=False)
        with self.db_connection.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO user_storage (owner_id, storage_key, value, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(owner_id, storage_key)
                DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (owner_id, key, payload, datetime.now().isoformat()),
            )
            conn.commit()
