"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# This file is at: study_studio/core/config.py
# .env is at: config/.env
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / "config" / ".env"

DEFAULT_DATABASE_PATH = Path.home() / ".config" / "study-studio" / "app.db"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value can be overridden through the environment, e.g.
    DATABASE_PATH=/tmp/tasks.db python init_db.py
    """

    # =========================================================================
    # Database
    # =========================================================================
    # DATABASE_PATH - SQLite file holding users, tags and tasks.
    # ":memory:" keeps everything in memory (tests, throwaway sessions).
    DATABASE_PATH: str = str(DEFAULT_DATABASE_PATH)

    # DATABASE_ECHO - echo SQL statements to the log
    DATABASE_ECHO: bool = False

    # =========================================================================
    # Application
    # =========================================================================
    APP_NAME: str = "Study Studio"

    # =========================================================================
    # Logging
    # =========================================================================
    # LOG_LEVEL - DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_LEVEL: str = "INFO"

    # LOG_FORMAT - "json" (structured) or "simple" (human-readable)
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", case_sensitive=True
    )

    @property
    def database_url(self) -> str:
        return sqlite_url(self.DATABASE_PATH)


def sqlite_url(path: str) -> str:
    """Async SQLAlchemy URL for a SQLite file (or ":memory:")."""
    return f"sqlite+aiosqlite:///{path}"


# Create global settings instance
settings = Settings()
