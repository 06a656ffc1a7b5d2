from __future__ import annotations

"""FastAPI router exposing idea submission, lifecycle, votes, follows and comments."""

from datetime import datetime, timezone
from typing import Any, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from ideas_analytics import (
    ChartBar,
    CommentThread,
    VolumePoint,
    bucket_volume,
    build_tracker,
    group_comments,
    sla_status,
    status_breakdown,
)
from ideas_repo import (
    Comment,
    CommentCreate,
    FollowResult,
    Idea,
    IdeaCategory,
    IdeaCreate,
    IdeaStatus,
    IdeaUpdate,
    Submitter,
    VoteResult,
    add_comment,
    add_vote,
    create_idea,
    delete_idea,
    follow_idea,
    get_idea,
    has_voted,
    is_following,
    list_comments,
    list_followed_ideas,
    list_ideas,
    list_voted_ideas,
    remove_vote,
    unfollow_idea,
    update_idea,
)

from .identity import get_current_user, is_reviewer, require_admin, require_reviewer
from .media import MEDIA_FIELD, discard_media, save_media
from .schemas import FollowState, IdeaDetail, ReviewItem

router = APIRouter(prefix="/api/ideas", tags=["ideas"])

RECENT_ACTIVITY_LIMIT = 5


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validation_error(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=exc.errors(include_url=False, include_context=False, include_input=False),
    )


async def _read_submission(request: Request) -> tuple[dict[str, Any], list[UploadFile]]:
    """Return the submitted fields and any ``media`` uploads (JSON or multipart)."""

    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        try:
            data = await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Body must be JSON or multipart form data") from exc
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Body must be a JSON object")
        return data, []

    form = await request.form()
    data: dict[str, Any] = {}
    for key in dict.fromkeys(form.keys()):
        if key == MEDIA_FIELD:
            continue
        values = [value for value in form.getlist(key) if isinstance(value, str)]
        if values:
            data[key] = values if len(values) > 1 else values[0]
    uploads = [
        value for value in form.getlist(MEDIA_FIELD) if isinstance(value, UploadFile) and value.filename
    ]
    return data, uploads


# ---------------------------------------------------------------------------
# Collection views (declared before /{idea_id})
# ---------------------------------------------------------------------------


@router.get("", response_model=list[Idea])
async def get_ideas(
    status: IdeaStatus | None = Query(default=None),
    category: IdeaCategory | None = Query(default=None),
    submitter_id: str | None = Query(default=None),
    mine: bool = Query(default=False),
    search: str | None = Query(default=None),
    sort_by: str | None = Query(default=None),
    sort_direction: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: Submitter = Depends(get_current_user),
):
    """List ideas; ``mine=true`` restricts to the caller's submissions."""

    return await list_ideas(
        status=status.value if status else None,
        category=category.value if category else None,
        submitter_id=user.id if mine else submitter_id,
        search=search,
        sort_by=sort_by,
        sort_direction=sort_direction,
        limit=limit,
        offset=offset,
    )


@router.get("/top", response_model=list[Idea])
async def get_top_ideas(
    limit: int = Query(default=10, ge=1, le=100),
    _: Submitter = Depends(get_current_user),
):
    return await list_ideas(sort_by="votes", sort_direction="desc", limit=limit)


@router.get("/volume", response_model=list[VolumePoint])
async def get_volume(
    window: str = Query(default="day", pattern="^(day|week)$"),
    periods: int = Query(default=5, ge=1, le=52),
    _: Submitter = Depends(get_current_user),
):
    ideas = await list_ideas()
    return bucket_volume((idea.created_at for idea in ideas), _now(), window=window, periods=periods)


@router.get("/by-status", response_model=list[ChartBar])
async def get_status_breakdown(_: Submitter = Depends(get_current_user)):
    return status_breakdown(await list_ideas())


@router.get("/recent-activity", response_model=list[Idea])
async def get_recent_activity(_: Submitter = Depends(get_current_user)):
    return await list_ideas(sort_by="created_at", limit=RECENT_ACTIVITY_LIMIT)


@router.get("/review", response_model=list[ReviewItem])
async def get_review_queue(_: Submitter = Depends(require_reviewer)):
    """Submitted ideas awaiting review, oldest first, with their SLA countdown."""

    now = _now()
    ideas = await list_ideas(status=IdeaStatus.SUBMITTED.value, sort_by="created_at", sort_direction="asc")
    return [ReviewItem(idea=idea, sla=sla_status(idea.created_at, now)) for idea in ideas]


@router.get("/my-votes", response_model=list[Idea])
async def get_my_votes(user: Submitter = Depends(get_current_user)):
    return await list_voted_ideas(user.id)


@router.get("/my-follows", response_model=list[Idea])
async def get_my_follows(user: Submitter = Depends(get_current_user)):
    return await list_followed_ideas(user.id)


@router.post("", response_model=Idea, status_code=201)
async def submit_idea(request: Request, user: Submitter = Depends(get_current_user)):
    """Create an idea from a JSON body or multipart form with ``media`` files."""

    data, uploads = await _read_submission(request)
    try:
        payload = IdeaCreate.model_validate(data)
    except ValidationError as exc:
        raise _validation_error(exc) from exc

    media_urls = await save_media(uploads) if uploads else []
    try:
        return await create_idea(user, payload, media_urls)
    except Exception:
        discard_media(media_urls)
        raise


# ---------------------------------------------------------------------------
# Single idea
# ---------------------------------------------------------------------------


@router.get("/{idea_id}", response_model=IdeaDetail)
async def get_idea_detail(idea_id: str, user: Submitter = Depends(get_current_user)):
    idea = await get_idea(idea_id)
    return IdeaDetail(
        **idea.model_dump(),
        tracker=build_tracker(idea.status),
        voted=await has_voted(idea_id, user.id),
        followed=await is_following(idea_id, user.id),
    )


@router.patch("/{idea_id}", response_model=Idea)
async def patch_idea(
    idea_id: str,
    payload: IdeaUpdate,
    user: Submitter = Depends(get_current_user),
):
    """Edit an idea; status and admin fields are reserved for reviewer roles."""

    return await update_idea(idea_id, user.id, payload, is_reviewer=is_reviewer(user))


@router.delete("/{idea_id}", status_code=204)
async def remove_idea(idea_id: str, _: Submitter = Depends(require_admin)) -> Response:
    await delete_idea(idea_id)
    return Response(status_code=204)


@router.post("/{idea_id}/vote", response_model=VoteResult)
async def vote(idea_id: str, user: Submitter = Depends(get_current_user)):
    return await add_vote(idea_id, user.id)


@router.delete("/{idea_id}/vote", response_model=VoteResult)
async def unvote(idea_id: str, user: Submitter = Depends(get_current_user)):
    return await remove_vote(idea_id, user.id)


@router.get("/{idea_id}/follow", response_model=FollowState)
async def get_follow_state(idea_id: str, user: Submitter = Depends(get_current_user)):
    await get_idea(idea_id)
    return FollowState(idea_id=idea_id, followed=await is_following(idea_id, user.id))


@router.post("/{idea_id}/follow", response_model=FollowResult)
async def follow(idea_id: str, user: Submitter = Depends(get_current_user)):
    return await follow_idea(idea_id, user.id)


@router.delete("/{idea_id}/follow", response_model=FollowResult)
async def unfollow(idea_id: str, user: Submitter = Depends(get_current_user)):
    return await unfollow_idea(idea_id, user.id)


@router.get("/{idea_id}/comments", response_model=Union[list[Comment], list[CommentThread]])
async def get_comments(
    idea_id: str,
    threaded: bool = Query(default=False),
    _: Submitter = Depends(get_current_user),
):
    """Flat comment list, or top-level comments with their replies when ``threaded``."""

    comments = await list_comments(idea_id)
    return group_comments(comments) if threaded else comments


@router.post("/{idea_id}/comments", response_model=Comment, status_code=201)
async def post_comment(
    idea_id: str,
    payload: CommentCreate,
    user: Submitter = Depends(get_current_user),
):
    return await add_comment(idea_id, user, payload)
