"""
SQLite access for the per-user key-value store
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from ...config import get_database_path

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS user_storage (
        owner_id INTEGER NOT NULL,
        storage_key TEXT NOT NULL,
        value TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (owner_id, storage_key)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_user_storage_updated ON user_storage(updated_at)",
)


class DatabaseConnection:
    """Opens connections to the storage database file"""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or get_database_path()
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._configure()

    def _configure(self) -> None:
        # WAL is persistent per database file, busy_timeout is per connection
        with self.get_connection() as conn:
            mode = conn.execute("PRAGMA journal_mode=WAL").fetchone()[0]
            logger.debug(f"SQLite journal mode for {self.db_path}: {mode}")

    @contextmanager
    def get_connection(self):
        """Yield a connection with Row access; rolled back and closed on failure"""
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Storage error on {self.db_path}: {e}")
            raise
        finally:
            conn.close()

    def init_database(self) -> None:
        """Create the storage table if missing"""
        with self.get_connection() as conn:
            for statement in SCHEMA:
                conn.execute(statement)
            conn.commit()
        logger.info(f"Storage initialized at {self.db_path}")
