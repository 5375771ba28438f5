"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from drivenote.config import settings

    # Access settings
    limit = settings.KNOWLEDGE_DAILY_CARD_LIMIT
    db_url = settings.DATABASE_URL
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Drive Note"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Persistence (SQLAlchemy URL)
    DATABASE_URL: str = "sqlite:///drivenote.db"

    # Calendar: IANA zone name used to truncate aware timestamps to a day.
    # Empty means the system local zone.
    TIMEZONE: str = ""

    # ===========================================
    # Knowledge cards
    # ===========================================
    KNOWLEDGE_DAILY_CARD_LIMIT: int = 3
    KNOWLEDGE_COOLDOWN_DAYS: int = 7  # Recently shown cards skip primary selection
    KNOWLEDGE_EXPOSURE_RETENTION_DAYS: int = 30  # Older exposure records are pruned

    # ===========================================
    # Tag suggestions
    # ===========================================
    TAG_MAX_STORE: int = 100  # Max distinct tags kept in the frequency table
    TAG_TOP_LIMIT: int = 50  # Size of the ranked top-tags cache
    TAG_SUGGESTION_LIMIT: int = 12
    TAG_TABLE_KEY: str = "tag_suggestion_freq_v1"

    # ===========================================
    # Safety score
    # ===========================================
    SAFETY_SCORE_BASE: int = 50
    SAFETY_SCORE_SUCCESS_WEIGHT: int = 5
    SAFETY_SCORE_MISTAKE_WEIGHT: int = 3
    SAFETY_SCORE_PUNCH_DIVISOR: int = 10
    SAFETY_SCORE_ROUTE_WEIGHT: int = 2
    SAFETY_SCORE_MIN: int = 0
    SAFETY_SCORE_MAX: int = 100

    # ===========================================
    # Streaks and routes
    # ===========================================
    STREAK_MILESTONES: list[int] = [3, 7, 14, 30, 100]
    EARTH_RADIUS_METERS: float = 6371000.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from default.yaml shipped with this package."""
    config_path = Path(__file__).parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
