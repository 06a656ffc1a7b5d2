"""FastAPI application composing the ideas API routers."""

from __future__ import annotations

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

load_dotenv(find_dotenv(usecwd=True))


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL") or os.getenv("LOGURU_LEVEL") or "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    logger.info("Logger configured at {level} level", level=level.upper())


from db_core import ensure_indexes, ping
from ideas_api import dashboard_router, install_exception_handlers, router as ideas_router, search_router
from ideas_api.config import settings as api_settings
from ideas_api.identity import close_client

from .config import settings

INDEXES = {
    "ideas": [("created_at", -1), ("status", 1), ("category", 1), ("submitter_id", 1), ("votes", -1)],
    "comments": [("idea_id", 1)],
    "idea_votes": [("user_id", 1), ("idea_id", 1)],
    "idea_follows": [("user_id", 1), ("idea_id", 1)],
}


_configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    Path(api_settings.media_dir).mkdir(parents=True, exist_ok=True)
    if settings.ensure_indexes:
        await ensure_indexes(INDEXES)
        logger.info("MongoDB indexes ensured")
    yield
    await close_client()


app = FastAPI(title=settings.api_title, version=settings.api_version, lifespan=lifespan)

# Allow the front-end origins (with credentials) to talk to this API.
if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
logger.info("CORS middleware added {origins}", origins=settings.cors_allow_origins)

install_exception_handlers(app)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Simple liveness endpoint for load balancers and probes."""

    return {"status": "ok"}


@app.get("/health/db", tags=["health"])
async def health_db() -> dict:
    return await ping()


app.include_router(ideas_router)
app.include_router(dashboard_router)
app.include_router(search_router)
app.mount(
    api_settings.media_url_prefix,
    StaticFiles(directory=api_settings.media_dir, check_dir=False),
    name="media",
)

"""Run with:

    uvicorn core_server.main:app --host 0.0.0.0 --port 8000 --reload
"""
