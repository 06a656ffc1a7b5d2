"""Configuration for the ideas API client."""

import os
from pathlib import Path

from pydantic import BaseModel, Field


def _default_drafts_dir() -> str:
    return os.getenv("IDEAS_DRAFTS_DIR") or str(Path.home() / ".ideas" / "drafts")


class ClientSettings(BaseModel):
    """Where the API lives and how long fetched queries stay fresh."""

    base_url: str = Field(default_factory=lambda: os.getenv("IDEAS_API_URL", "http://localhost:8000"))
    timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("IDEAS_CLIENT_TIMEOUT", "10.0"))
    )
    cache_stale_seconds: float = Field(
        default_factory=lambda: float(os.getenv("IDEAS_CACHE_STALE_SECONDS", "60"))
    )
    drafts_dir: str = Field(default_factory=_default_drafts_dir)


settings = ClientSettings()
