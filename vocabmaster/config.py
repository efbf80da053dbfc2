"""
Configuration management for VocabMaster
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Telegram Bot Configuration
    telegram_bot_token: str = Field(default="")
    allowed_users: str = Field(default="")

    # Database Configuration
    database_url: str = Field(default="sqlite:///data/vocabmaster.db")

    # Application Configuration
    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)
    polling_interval: float = Field(default=1.0)

    # Catalog / dictionary service
    catalog_source: str = Field(default="sample")  # sample | dictionary | wordsapi
    dictionary_api_url: str = Field(
        default="https://api.dictionaryapi.dev/api/v2/entries/en"
    )
    words_api_url: str = Field(default="https://wordsapiv1.p.mashape.com/words")
    words_api_key: str = Field(default="")
    words_api_host: str = Field(default="wordsapiv1.p.mashape.com")
    api_timeout: float = Field(default=10.0)

    # Session Configuration
    session_length: int = Field(default=20)
    history_window: int = Field(default=5)
    top_k: int = Field(default=3)
    advance_delay_seconds: float = Field(default=0.1)
    dashboard_after_words: int = Field(default=50)
    session_max_age_hours: int = Field(default=24)

    # Priority weights
    new_word_priority: float = Field(default=100.0)
    base_priority: float = Field(default=50.0)
    difficulty_weight: float = Field(default=30.0)
    recency_rate: float = Field(default=10.0)
    recency_cap: float = Field(default=50.0)
    accuracy_weight: float = Field(default=20.0)
    max_priority: float = Field(default=100.0)

    # Insights Configuration
    strong_category_threshold: float = Field(default=70.0)
    min_category_words: int = Field(default=2)
    max_reported_categories: int = Field(default=5)
    words_studied_milestone: int = Field(default=100)

    @property
    def logging_level(self) -> int:
        """Numeric log level; DEBUG forces debug output"""
        if self.debug:
            return logging.DEBUG
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @property
    def allowed_users_list(self) -> list[int]:
        """Convert allowed_users string to list of integers"""
        if not self.allowed_users.strip():
            return []
        return [
            int(user_id.strip())
            for user_id in self.allowed_users.split(",")
            if user_id.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def get_database_path(database_url: str | None = None) -> str:
    """Get the database file path from URL"""
    url = database_url or get_settings().database_url
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "")
    return "data/vocabmaster.db"
