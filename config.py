"""
Application settings
Centralized configuration from environment variables
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


class Settings:
    # Database
    DB_USER: str = os.getenv("DB_USER", "root")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_HOST: str = os.getenv("DB_HOST", "127.0.0.1")
    DB_PORT: str = os.getenv("DB_PORT", "3306")
    DB_NAME: str = os.getenv("DB_NAME", "users")
    SQL_ECHO: bool = _env_bool("SQL_ECHO")

    # Service
    HOST: str = os.getenv("HOST", "0.0.0.0")
    # Cloud Run uses PORT, fallback to FASTAPIPORT for local development
    PORT: int = _env_int("PORT", _env_int("FASTAPIPORT", 5004))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Pagination
    DEFAULT_PAGE_LIMIT: int = _env_int("DEFAULT_PAGE_LIMIT", 10)
    MAX_PAGE_LIMIT: int = _env_int("MAX_PAGE_LIMIT", 100)

    # Application
    APP_NAME: str = "User Service"
    APP_VERSION: str = "0.1.0"

    def __init__(self, database_url: Optional[str] = None) -> None:
        self._database_url = database_url or os.getenv("DATABASE_URL")

    @property
    def DATABASE_URL(self) -> str:
        if self._database_url:
            return self._database_url
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


settings = Settings()
