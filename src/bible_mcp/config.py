"""Process configuration read from environment variables."""

from __future__ import annotations

import os

from pydantic import BaseModel

DEFAULT_BIBLE_ID = "de4e12af7f28f599-02"
DEFAULT_BASE_URL = "https://api.scripture.api.bible/v1"


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


class Settings(BaseModel):
    api_key: str
    bible_id: str = DEFAULT_BIBLE_ID
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    keepalive_seconds: float = 30.0
    port: int = 8000

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment.

        BIBLE_API_KEY is required; everything else has a default.
        """
        api_key = os.getenv("BIBLE_API_KEY", "")
        if not api_key:
            raise ConfigError("BIBLE_API_KEY environment variable is required")

        base_url = (
            os.getenv("BIBLE_API_BASE_URL") or os.getenv("BASE_URL") or DEFAULT_BASE_URL
        )
        try:
            return cls(
                api_key=api_key,
                bible_id=os.getenv("BIBLE_ID") or DEFAULT_BIBLE_ID,
                base_url=base_url.rstrip("/"),
                timeout=float(os.getenv("BIBLE_API_TIMEOUT", 30)),
                keepalive_seconds=float(os.getenv("SSE_KEEPALIVE_SECONDS", 30)),
                port=int(os.getenv("PORT", 8000)),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
