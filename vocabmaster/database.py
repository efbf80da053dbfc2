"""
Storage entry points for VocabMaster
"""

from .config import get_database_path
from .core.database.database_manager import DatabaseManager, get_db_manager

__all__ = ["DatabaseManager", "get_database_path", "get_db_manager"]
