"""Application configuration loaded from environment variables."""

import os
import re
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "http://localhost:3001/api"


def normalize_api_url(raw_url: str) -> str:
    """Normalize a favorites API base URL so it always ends in ``/api``.

    Whitespace and trailing slashes are stripped; an empty value falls back
    to the local development server.
    """
    base = re.sub(r"\s", "", raw_url or "").rstrip("/")
    if not base:
        return DEFAULT_API_URL
    if not re.search(r"/api$", base, re.IGNORECASE):
        base = f"{base}/api"
    return base


class Settings:
    """Application settings loaded from environment."""

    def __init__(self):
        self.api_token: str = os.getenv("FAVSYNC_API_TOKEN", "")
        self.secret_key: str = os.getenv("SECRET_KEY", "dev-secret-key")
        self.database_url: str = os.getenv(
            "DATABASE_URL", "sqlite+aiosqlite:///./favsync.db"
        )
        self.favorites_storage_key: str = os.getenv(
            "FAVORITES_STORAGE_KEY", "@favsync_favorites"
        )
        self.sync_status_storage_key: str = os.getenv(
            "SYNC_STATUS_STORAGE_KEY", "@favsync_sync_status"
        )
        self.scripture_books_path: Optional[str] = os.getenv("SCRIPTURE_BOOKS_PATH") or None
        self.refresh_interval: float = float(os.getenv("FAVORITES_REFRESH_INTERVAL", "2.0"))
        self.request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "30.0"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self._raw_api_url: str = os.getenv("FAVSYNC_API_URL", "")

    @property
    def api_base_url(self) -> str:
        return normalize_api_url(self._raw_api_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
