"""
MoodyFlicks - Application Configuration
Uses pydantic-settings for type-safe environment variable management.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "MoodyFlicks"
    ENVIRONMENT: str = "development"  # "development" or "production"
    DEBUG: bool = False
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # Database (slot store)
    DATABASE_URL: str = "sqlite+aiosqlite:///./moodyflicks.db"

    # TMDB
    TMDB_API_KEY: str = ""
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE: str = "https://image.tmdb.org/t/p"
    TMDB_TIMEOUT: float = 15.0

    # Quiz
    QUIZ_TIME_LIMIT: int = 30  # seconds per question in timed mode
    QUIZ_EXPLANATION_DELAY: float = 2.5
    QUIZ_SESSION_LIMIT: int = 500

    # Daily challenge
    DAILY_BASE_POINTS: int = 50
    DAILY_STREAK_BONUS: int = 5

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
