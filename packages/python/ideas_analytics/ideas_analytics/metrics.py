"""Dashboard KPI metrics and top-N views."""

from __future__ import annotations

from typing import List, Sequence

from pydantic import BaseModel

from ideas_repo.models import Idea, IdeaStatus

from ._time import as_naive_utc


class Metrics(BaseModel):
    ideas_submitted: int = 0
    in_review: int = 0
    implemented: int = 0
    cost_saved: int = 0
    revenue_generated: int = 0


def compute_metrics(ideas: Sequence[Idea]) -> Metrics:
    return Metrics(
        ideas_submitted=len(ideas),
        in_review=sum(1 for idea in ideas if idea.status == IdeaStatus.IN_REVIEW),
        implemented=sum(1 for idea in ideas if idea.status == IdeaStatus.IMPLEMENTED),
        cost_saved=sum(idea.cost_saved or 0 for idea in ideas),
        revenue_generated=sum(idea.revenue_generated or 0 for idea in ideas),
    )


def top_ideas(ideas: Sequence[Idea], limit: int = 10) -> List[Idea]:
    """Most voted first; equal vote counts keep their incoming order."""

    return sorted(ideas, key=lambda idea: idea.votes, reverse=True)[:limit]


def recent_ideas(ideas: Sequence[Idea], limit: int = 5) -> List[Idea]:
    return sorted(ideas, key=lambda idea: as_naive_utc(idea.created_at), reverse=True)[:limit]
