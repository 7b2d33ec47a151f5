from __future__ import annotations

from pathlib import Path

import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = REPO_ROOT / ".env"

DEFAULT_API_URL = "http://localhost:3001"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore"
    )

    # human-readable console logs instead of JSON
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # SnailMail distance service
    SNAILMAIL_API_URL: str = DEFAULT_API_URL
    SNAILMAIL_TIMEOUT_SECONDS: float = 10.0
    SNAILMAIL_CONNECT_TIMEOUT_SECONDS: float = 5.0

    @property
    def api_base_url(self) -> str:
        # Blank values in `.env` mean "unset" rather than an empty host.
        base = (self.SNAILMAIL_API_URL or "").strip().rstrip("/")
        return base or DEFAULT_API_URL

    @property
    def http_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.SNAILMAIL_TIMEOUT_SECONDS,
            connect=self.SNAILMAIL_CONNECT_TIMEOUT_SECONDS,
        )


settings = Settings()
