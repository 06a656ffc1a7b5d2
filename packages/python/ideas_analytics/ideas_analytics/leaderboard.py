"""Per-user leaderboard derived from the idea list."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ideas_repo.models import Idea, IdeaCategory, IdeaStatus, Submitter

from ._time import as_naive_utc

SUBMISSION_POINTS = 2
IMPLEMENTATION_POINTS = 5

TOP_CONTRIBUTOR_IMPACT = 50
ACTIVE_CONTRIBUTOR_IDEAS = 2

TIME_RANGES = ("all", "this-week", "last-week", "this-month", "last-month", "this-year", "custom")


class CategoryBreakdown(BaseModel):
    ideas: int = 0
    challenges: int = 0
    pain_points: int = 0


class LeaderboardEntry(BaseModel):
    user: Submitter
    ideas_submitted: int = 0
    ideas_implemented: int = 0
    votes_received: int = 0
    impact_score: int = 0
    last_submission_date: Optional[datetime] = None
    category_breakdown: CategoryBreakdown = Field(default_factory=CategoryBreakdown)
    status: Optional[str] = None


SORT_KEYS = {
    "ideas": lambda entry: entry.ideas_submitted,
    "votes": lambda entry: entry.votes_received,
    "approved": lambda entry: entry.ideas_implemented,
    "impact": lambda entry: entry.impact_score,
    "newest": lambda entry: entry.last_submission_date or datetime.min,
}

_BREAKDOWN_FIELD = {
    IdeaCategory.OPPORTUNITY: "ideas",
    IdeaCategory.CHALLENGE: "challenges",
    IdeaCategory.PAIN_POINT: "pain_points",
}


def time_range_bounds(
    time_range: Optional[str],
    now: datetime,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Return ``(start, end)`` for a named range; ``end`` is exclusive, ``None`` is open."""

    now = as_naive_utc(now)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today - timedelta(days=today.weekday())
    month_start = today.replace(day=1)

    if not time_range or time_range == "all":
        return None, None
    if time_range == "this-week":
        return week_start, None
    if time_range == "last-week":
        return week_start - timedelta(days=7), week_start
    if time_range == "this-month":
        return month_start, None
    if time_range == "last-month":
        previous = (month_start - timedelta(days=1)).replace(day=1)
        return previous, month_start
    if time_range == "this-year":
        return today.replace(month=1, day=1), None
    if time_range == "custom":
        return (
            as_naive_utc(start) if start else None,
            as_naive_utc(end) if end else None,
        )
    raise ValueError(f"Unknown time range '{time_range}' (allowed: {', '.join(TIME_RANGES)})")


def contributor_status(impact_score: int, ideas_submitted: int) -> Optional[str]:
    if impact_score > TOP_CONTRIBUTOR_IMPACT:
        return "Top Contributor"
    if ideas_submitted > ACTIVE_CONTRIBUTOR_IDEAS:
        return "Active Contributor"
    if ideas_submitted > 0:
        return "New Contributor"
    return None


def _in_range(idea: Idea, start: Optional[datetime], end: Optional[datetime]) -> bool:
    created = as_naive_utc(idea.created_at)
    if start is not None and created < start:
        return False
    if end is not None and created >= end:
        return False
    return True


def build_leaderboard(
    ideas: Sequence[Idea],
    *,
    sort_by: str = "ideas",
    category: Optional[str] = None,
    department: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> List[LeaderboardEntry]:
    """
    Aggregate ideas per submitter and rank them.

    Entries are sorted descending by ``sort_by``; the sort is stable so ties
    keep the order in which submitters first appear in ``ideas``.
    """

    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{sort_by}' (allowed: {', '.join(SORT_KEYS)})")

    entries: Dict[str, LeaderboardEntry] = {}
    for idea in ideas:
        if category and idea.category.value != category:
            continue
        if not _in_range(idea, start, end):
            continue

        submitter = idea.submitter or Submitter(id=idea.submitter_id)
        if department and submitter.department != department:
            continue

        entry = entries.get(idea.submitter_id)
        if entry is None:
            entry = entries[idea.submitter_id] = LeaderboardEntry(user=submitter)

        entry.ideas_submitted += 1
        entry.votes_received += idea.votes
        if idea.status == IdeaStatus.IMPLEMENTED:
            entry.ideas_implemented += 1
        field = _BREAKDOWN_FIELD[idea.category]
        setattr(entry.category_breakdown, field, getattr(entry.category_breakdown, field) + 1)
        created = as_naive_utc(idea.created_at)
        if entry.last_submission_date is None or created > entry.last_submission_date:
            entry.last_submission_date = created

    for entry in entries.values():
        entry.impact_score = (
            entry.ideas_submitted * SUBMISSION_POINTS
            + entry.ideas_implemented * IMPLEMENTATION_POINTS
            + entry.votes_received
        )
        entry.status = contributor_status(entry.impact_score, entry.ideas_submitted)

    ranked = sorted(entries.values(), key=SORT_KEYS[sort_by], reverse=True)
    return ranked[:limit] if limit else ranked
