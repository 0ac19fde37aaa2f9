"""
Ledger engine settings.

Values come from the process environment, optionally seeded from
a .env file in the working directory. Connection strings and
credentials belong in the environment, never in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

from ledger_engine.money import CURRENCY_CODE

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Environment-driven settings, read once at import."""

    APP_NAME: str = "Ledger Engine"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    # Echo every SQL statement to the log
    DEBUG: bool = _flag("DEBUG")

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/ledger"
    )
    # Seconds a write may wait for an account lock before it
    # fails with STORE_FAILURE.
    LOCK_TIMEOUT_SECONDS: float = float(os.getenv("LOCK_TIMEOUT_SECONDS", "5"))
    # Local development against SQLite only; deployed databases
    # are migrated with Alembic.
    AUTO_CREATE_SCHEMA: bool = _flag("AUTO_CREATE_SCHEMA")

    # Currency given to accounts opened without one
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD")


@lru_cache()
def get_settings() -> Settings:
    """Settings shared by the app factory and the Alembic env."""
    return Settings()


def check_settings(settings: Settings) -> None:
    """
    Reject settings the app cannot run with.

    Called once by create_app() so a bad value stops startup
    instead of failing the first request that uses it.
    """
    if not CURRENCY_CODE.match(settings.DEFAULT_CURRENCY or ""):
        raise ValueError(
            f"DEFAULT_CURRENCY must be a three-letter upper-case code, "
            f"got {settings.DEFAULT_CURRENCY!r}"
        )
    if settings.LOCK_TIMEOUT_SECONDS <= 0:
        raise ValueError(
            f"LOCK_TIMEOUT_SECONDS must be positive, "
            f"got {settings.LOCK_TIMEOUT_SECONDS}"
        )
