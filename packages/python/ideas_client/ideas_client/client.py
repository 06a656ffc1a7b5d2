"""Async client for the ideas REST API."""

from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from loguru import logger
from pydantic import TypeAdapter

from ideas_analytics import (
    ChartBar,
    CommentThread,
    LeaderboardEntry,
    Metrics,
    TrackerStep,
    VolumePoint,
    build_tracker,
)
from ideas_repo.models import Comment, FollowResult, Idea, Suggestion, VoteResult

from .cache import QueryCache, MISSING
from .config import settings
from .errors import ApiError

# (filename, content, content type)
MediaFile = Tuple[str, bytes, str]

MEDIA_FIELD = "media"

# Cached reads that may change after any idea mutation.
IDEA_QUERY_PREFIXES = (
    "/api/ideas",
    "/api/chart",
    "/api/metrics",
    "/api/leaderboard",
    "/api/search",
)

_IDEAS = TypeAdapter(List[Idea])
_COMMENTS = TypeAdapter(List[Comment])
_THREADS = TypeAdapter(List[CommentThread])
_BARS = TypeAdapter(List[ChartBar])
_VOLUME = TypeAdapter(List[VolumePoint])
_LEADERBOARD = TypeAdapter(List[LeaderboardEntry])
_SUGGESTIONS = TypeAdapter(List[Suggestion])


class IdeaView(Idea):
    """Idea as seen by the current user."""

    voted: bool = False
    followed: bool = False

    @property
    def tracker(self) -> List[TrackerStep]:
        return build_tracker(self.status)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message") or body.get("error")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return json.dumps(detail)
    return response.reason_phrase


def _multipart_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for name, value in payload.items():
        if value is None:
            continue
        if isinstance(value, (list, dict)):
            fields[name] = json.dumps(value)
        else:
            fields[name] = str(value)
    return fields


class IdeasClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    GET requests go through a ``QueryCache``; mutations invalidate the cached
    idea queries once the server confirms them. Every failure, HTTP or
    transport, is raised as ``ApiError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        cookies: Optional[str] = None,
        timeout: Optional[float] = None,
        cache: Optional[QueryCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Cookie": cookies} if cookies else None
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.base_url,
            timeout=timeout if timeout is not None else settings.timeout_seconds,
            headers=headers,
            transport=transport,
        )
        self.cache = cache if cache is not None else QueryCache(settings.cache_stale_seconds)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "IdeasClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        start = time.perf_counter()
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            duration = (time.perf_counter() - start) * 1000
            logger.warning(
                "{method} {path} failed after {duration:.2f} ms: {error}",
                method=method,
                path=path,
                duration=duration,
                error=exc,
            )
            raise ApiError(None, str(exc) or type(exc).__name__) from exc

        duration = (time.perf_counter() - start) * 1000
        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "{method} {path} -> {status} in {duration:.2f} ms: {message}",
                method=method,
                path=path,
                status=response.status_code,
                duration=duration,
                message=message,
            )
            raise ApiError(response.status_code, message)

        logger.debug(
            "{method} {path} -> {status} in {duration:.2f} ms",
            method=method,
            path=path,
            status=response.status_code,
            duration=duration,
        )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = {name: value for name, value in (params or {}).items() if value is not None}
        key = self.cache.key(path, params)
        cached = self.cache.get(key)
        if cached is not MISSING:
            return cached
        data = await self._request("GET", path, params=params)
        self.cache.set(key, data)
        return data

    async def _mutate(self, method: str, path: str, **kwargs) -> Any:
        data = await self._request(method, path, **kwargs)
        self.cache.invalidate(*IDEA_QUERY_PREFIXES)
        return data

    # ------------------------------------------------------------------
    # Ideas
    # ------------------------------------------------------------------

    async def list_ideas(self, **filters: Any) -> List[Idea]:
        return _IDEAS.validate_python(await self._get("/api/ideas", filters))

    async def top_ideas(self, limit: int = 10) -> List[Idea]:
        return _IDEAS.validate_python(await self._get("/api/ideas/top", {"limit": limit}))

    async def recent_activity(self) -> List[Idea]:
        return _IDEAS.validate_python(await self._get("/api/ideas/recent-activity"))

    async def my_votes(self) -> List[Idea]:
        return _IDEAS.validate_python(await self._get("/api/ideas/my-votes"))

    async def my_follows(self) -> List[Idea]:
        return _IDEAS.validate_python(await self._get("/api/ideas/my-follows"))

    async def get_idea(self, idea_id: str) -> IdeaView:
        return IdeaView.model_validate(await self._get(f"/api/ideas/{idea_id}"))

    async def submit_idea(self, payload: Dict[str, Any], media: Sequence[MediaFile] = ()) -> Idea:
        """POST a submission: JSON, or multipart with ``media`` files when any are attached."""

        if media:
            files = [(MEDIA_FIELD, (name, content, content_type)) for name, content, content_type in media]
            data = await self._mutate("POST", "/api/ideas", data=_multipart_fields(payload), files=files)
        else:
            data = await self._mutate("POST", "/api/ideas", json=payload)
        return Idea.model_validate(data)

    async def update_idea(self, idea_id: str, changes: Dict[str, Any]) -> Idea:
        return Idea.model_validate(await self._mutate("PATCH", f"/api/ideas/{idea_id}", json=changes))

    async def change_status(self, idea_id: str, status: str) -> Idea:
        return await self.update_idea(idea_id, {"status": status})

    async def delete_idea(self, idea_id: str) -> None:
        await self._mutate("DELETE", f"/api/ideas/{idea_id}")

    # ------------------------------------------------------------------
    # Votes and follows
    # ------------------------------------------------------------------

    async def vote(self, idea_id: str) -> VoteResult:
        return VoteResult.model_validate(await self._mutate("POST", f"/api/ideas/{idea_id}/vote"))

    async def unvote(self, idea_id: str) -> VoteResult:
        return VoteResult.model_validate(await self._mutate("DELETE", f"/api/ideas/{idea_id}/vote"))

    async def follow(self, idea_id: str) -> FollowResult:
        return FollowResult.model_validate(await self._mutate("POST", f"/api/ideas/{idea_id}/follow"))

    async def unfollow(self, idea_id: str) -> FollowResult:
        return FollowResult.model_validate(await self._mutate("DELETE", f"/api/ideas/{idea_id}/follow"))

    async def is_following(self, idea_id: str) -> bool:
        data = await self._get(f"/api/ideas/{idea_id}/follow")
        return bool(data.get("followed"))

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def comments(self, idea_id: str) -> List[Comment]:
        return _COMMENTS.validate_python(await self._get(f"/api/ideas/{idea_id}/comments"))

    async def comment_threads(self, idea_id: str) -> List[CommentThread]:
        data = await self._get(f"/api/ideas/{idea_id}/comments", {"threaded": "true"})
        return _THREADS.validate_python(data)

    async def add_comment(self, idea_id: str, content: str, parent_id: Optional[str] = None) -> Comment:
        body = {"content": content, "parent_id": parent_id}
        data = await self._request("POST", f"/api/ideas/{idea_id}/comments", json=body)
        self.cache.invalidate(f"/api/ideas/{idea_id}/comments")
        return Comment.model_validate(data)

    # ------------------------------------------------------------------
    # Dashboard and search
    # ------------------------------------------------------------------

    async def volume(self, window: str = "day", periods: int = 5) -> List[VolumePoint]:
        data = await self._get("/api/ideas/volume", {"window": window, "periods": periods})
        return _VOLUME.validate_python(data)

    async def status_breakdown(self) -> List[ChartBar]:
        return _BARS.validate_python(await self._get("/api/ideas/by-status"))

    async def category_chart(self) -> List[ChartBar]:
        return _BARS.validate_python(await self._get("/api/chart/categories"))

    async def metrics(self) -> Metrics:
        return Metrics.model_validate(await self._get("/api/metrics"))

    async def leaderboard(self, **filters: Any) -> List[LeaderboardEntry]:
        return _LEADERBOARD.validate_python(await self._get("/api/leaderboard", filters))

    async def search(self, query: str) -> Dict[str, List[Idea]]:
        data = await self._get("/api/search", {"q": query})
        return {group: _IDEAS.validate_python(items) for group, items in data.items()}

    async def suggestions(self, query: str) -> List[Suggestion]:
        return _SUGGESTIONS.validate_python(await self._get("/api/search/suggestions", {"q": query}))
