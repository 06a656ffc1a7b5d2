"""Identity resolution via Ory Kratos and role checks for FastAPI dependencies."""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx
from fastapi import Depends, HTTPException, Request
from loguru import logger

from ideas_repo import Submitter

from .config import settings

ROLES = ("user", "reviewer", "transformer", "implementer", "admin")
REVIEWER_ROLES = frozenset({"reviewer", "transformer", "implementer", "admin"})

_client: httpx.AsyncClient | None = None


def _get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        _client = httpx.AsyncClient()
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def fetch_identity(cookies: str, *, timeout: Optional[float] = None) -> dict:
    """Resolve the Kratos identity owning the session carried by ``cookies``."""

    url = f"{settings.kratos_public_url.rstrip('/')}/sessions/whoami"
    start = time.perf_counter()
    try:
        resp = await _get_client().get(
            url,
            headers={"Cookie": cookies},
            timeout=timeout if timeout is not None else settings.timeout_seconds,
        )
    except httpx.RequestError as exc:
        duration = (time.perf_counter() - start) * 1000
        logger.warning(
            "Kratos whoami request failed after {duration:.2f} ms: {error}",
            duration=duration,
            error=exc,
        )
        raise HTTPException(status_code=502, detail="Identity service unavailable") from exc

    duration = (time.perf_counter() - start) * 1000
    logger.debug(
        "Kratos whoami responded with {status} in {duration:.2f} ms",
        status=resp.status_code,
        duration=duration,
    )

    if resp.status_code == 200:
        identity = resp.json().get("identity")
        if isinstance(identity, dict) and identity.get("id"):
            return identity
        raise HTTPException(status_code=502, detail="Identity response missing identity")

    if resp.status_code in (401, 403):
        raise HTTPException(status_code=401, detail="Not authenticated")

    raise HTTPException(status_code=502, detail="Identity service error")


async def get_identity(request: Request) -> dict:
    """Cache the identity on the request state so later dependencies reuse it."""

    cached = getattr(request.state, "identity", None)
    if cached is not None:
        return cached

    cookies = request.headers.get("cookie")
    if not cookies:
        raise HTTPException(status_code=401, detail="Not authenticated")

    identity = await fetch_identity(cookies)
    request.state.identity = identity
    return identity


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed:
            return trimmed
    return None


def _display_name(traits: dict[str, Any]) -> str:
    name = traits.get("name")
    if isinstance(name, dict):
        joined = " ".join(part for part in (_text(name.get("first")), _text(name.get("last"))) if part)
        name = joined or None
    return _text(traits.get("display_name")) or _text(name) or _text(traits.get("email")) or "Anonymous"


def user_from_identity(identity: dict[str, Any]) -> Submitter:
    """Map a Kratos identity payload onto the submitter snapshot stored with ideas."""

    traits = identity.get("traits")
    if not isinstance(traits, dict):
        traits = {}
    role = (_text(traits.get("role")) or "user").lower()
    return Submitter(
        id=str(identity["id"]),
        display_name=_display_name(traits),
        department=_text(traits.get("department")),
        role=role if role in ROLES else "user",
    )


def is_reviewer(user: Submitter) -> bool:
    return user.role in REVIEWER_ROLES


async def get_current_user(identity: dict = Depends(get_identity)) -> Submitter:
    return user_from_identity(identity)


async def require_reviewer(user: Submitter = Depends(get_current_user)) -> Submitter:
    if not is_reviewer(user):
        raise HTTPException(status_code=403, detail="Reviewer role required")
    return user


async def require_admin(user: Submitter = Depends(get_current_user)) -> Submitter:
    if user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return user
