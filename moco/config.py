"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. The .env file is gitignored; .env.example provides a safe
template for developers.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from moco.config import settings
    print(settings.LOCALE)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the moco API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Used to sign JWT tokens
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "moco API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    # SQLite for local use; any async SQLAlchemy URL (e.g. postgresql+asyncpg) in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/moco.db"

    # --- Authentication ---
    # REQUIRED: No default, forces the developer to set a real secret
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Display ---
    # Locale for goal ETA labels ("id" or "en"); amounts are formatted as "Rp 1.234.567"
    LOCALE: str = "id"
    CURRENCY_LABEL: str = "Rp"
    THOUSANDS_SEPARATOR: str = "."

    # --- Change feed ---
    # Events buffered per subscriber before new ones are dropped
    CHANGE_QUEUE_SIZE: int = 100

    # --- CORS ---
    # Origins allowed to make cross-origin requests (frontend URLs)
    ALLOWED_ORIGINS: list[str] = ["http://localhost:5173"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
