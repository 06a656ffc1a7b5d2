"""Local storage for media attached to submissions."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List
from uuid import uuid4

from loguru import logger
from starlette.datastructures import UploadFile

from .config import settings

MEDIA_FIELD = "media"
_MAX_SUFFIX = 16


def media_directory() -> Path:
    return Path(settings.media_dir)


async def save_media(uploads: Iterable[UploadFile]) -> List[str]:
    """Write uploads under ``settings.media_dir`` and return their public URLs."""

    directory = media_directory()
    directory.mkdir(parents=True, exist_ok=True)
    urls: List[str] = []
    for upload in uploads:
        suffix = Path(upload.filename or "").suffix[:_MAX_SUFFIX]
        name = f"{uuid4().hex}{suffix}"
        content = await upload.read()
        (directory / name).write_bytes(content)
        urls.append(f"{settings.media_url_prefix.rstrip('/')}/{name}")
        logger.debug(
            "Stored media {filename} ({size} bytes) as {name}",
            filename=upload.filename,
            size=len(content),
            name=name,
        )
    return urls


def discard_media(urls: Iterable[str]) -> None:
    """Remove files previously written by ``save_media``."""

    directory = media_directory()
    for url in urls:
        path = directory / url.rsplit("/", 1)[-1]
        path.unlink(missing_ok=True)
        logger.debug("Discarded media {path}", path=path)
