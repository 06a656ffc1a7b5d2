"""Dashboard aggregations: category chart, KPI metrics and leaderboard."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from ideas_analytics import (
    ChartBar,
    LeaderboardEntry,
    Metrics,
    build_leaderboard,
    category_chart,
    compute_metrics,
    time_range_bounds,
)
from ideas_analytics.leaderboard import SORT_KEYS, TIME_RANGES
from ideas_repo import IdeaCategory, Submitter, list_ideas

from .identity import get_current_user

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/chart/categories", response_model=list[ChartBar])
async def get_category_chart(_: Submitter = Depends(get_current_user)):
    return category_chart(await list_ideas())


@router.get("/metrics", response_model=Metrics)
async def get_metrics(_: Submitter = Depends(get_current_user)):
    return compute_metrics(await list_ideas())


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    time_range: str = Query(default="all"),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    category: IdeaCategory | None = Query(default=None),
    department: str | None = Query(default=None),
    sort_by: str = Query(default="ideas"),
    limit: int | None = Query(default=None, ge=1, le=500),
    _: Submitter = Depends(get_current_user),
):
    """Rank submitters by the selected metric within the selected time range."""

    if time_range not in TIME_RANGES:
        raise HTTPException(status_code=400, detail=f"time_range must be one of {', '.join(TIME_RANGES)}")
    if sort_by not in SORT_KEYS:
        raise HTTPException(status_code=400, detail=f"sort_by must be one of {', '.join(SORT_KEYS)}")

    start, end = time_range_bounds(time_range, datetime.now(timezone.utc), start_date, end_date)
    # Oldest first so ties keep submission order.
    ideas = await list_ideas(sort_by="created_at", sort_direction="asc")
    return build_leaderboard(
        ideas,
        sort_by=sort_by,
        category=category.value if category else None,
        department=department,
        start=start,
        end=end,
        limit=limit,
    )
