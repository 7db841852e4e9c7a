"""
Environment-based configuration using pydantic-settings.
API credentials come from environment variables, never hardcoded.
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Core ────────────────────────────────────────────────────────────────
    ENV: str = "production"
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # ── YouTube ─────────────────────────────────────────────────────────────
    YOUTUBE_API_KEY: str = ""

    # ── Jamendo ─────────────────────────────────────────────────────────────
    JAMENDO_CLIENT_ID: str = ""

    # ── Cache ───────────────────────────────────────────────────────────────
    CACHE_TTL_SECONDS: int = 600
    CACHE_MAX_ENTRIES: int = 1024

    # ── HTTP client ──────────────────────────────────────────────────────────
    HTTP_TIMEOUT_SECONDS: int = 30
    HTTP_MAX_REDIRECTS: int = 3
    HTTP_RETRY_ATTEMPTS: int = 3
    HTTP_RETRY_BACKOFF: float = 1.5

    # ── Player ───────────────────────────────────────────────────────────────
    PLAYER_API_BASE: str = "http://localhost:4000"
    PLAYER_VIDEO_START_DELAY: float = 1.0   # seconds, lets the embed load
    PLAYER_POLL_INTERVAL: float = 0.5
    PLAYER_SEARCH_DEBOUNCE: float = 0.4

    @field_validator("PLAYER_API_BASE", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return str(v).rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
