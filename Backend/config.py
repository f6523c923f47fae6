"""
LiftLog Configuration
Load environment variables and define app settings.
"""
import os
from pydantic_settings import BaseSettings
from functools import lru_cache


DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), "data", "exercises.json")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "LiftLog"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Exercise catalog
    EXERCISE_CATALOG_PATH: str = DEFAULT_CATALOG_PATH
    EXCLUDED_CATEGORIES: list[str] = ["stretching", "cardio"]

    # Analysis
    SUGGESTIONS_PER_GROUP: int = 5
    DEFAULT_TIME_PERIOD: int = 7

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Quick access
settings = get_settings()

# ============================================================
# Example .env file (create this in your project root):
# ============================================================
"""
LOG_LEVEL=DEBUG
EXERCISE_CATALOG_PATH=/srv/liftlog/exercises.json
EXCLUDED_CATEGORIES=["stretching", "cardio", "plyometrics"]
SUGGESTIONS_PER_GROUP=5
"""
