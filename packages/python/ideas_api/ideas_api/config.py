"""Configuration for the ideas API package."""

import os

from pydantic import BaseModel, Field


class IdeasApiSettings(BaseModel):
    """Settings for the identity provider and uploaded media."""

    kratos_public_url: str = Field(
        default_factory=lambda: os.getenv("KRATOS_PUBLIC_URL", "http://kratos:4433")
    )
    timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("IDENTITY_TIMEOUT_SECONDS", "5.0"))
    )
    media_dir: str = Field(default_factory=lambda: os.getenv("MEDIA_DIR", "./media"))
    media_url_prefix: str = Field(default_factory=lambda: os.getenv("MEDIA_URL_PREFIX", "/media"))


settings = IdeasApiSettings()
