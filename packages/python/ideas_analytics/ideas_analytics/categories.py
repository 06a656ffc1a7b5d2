"""Category and status breakdowns for the dashboard charts."""

from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from pydantic import BaseModel

from ideas_repo.lifecycle import STATUS_ORDER
from ideas_repo.models import Idea, IdeaCategory


class ChartBar(BaseModel):
    name: str
    value: int
    fill: str | None = None


CATEGORY_CHART = (
    (IdeaCategory.OPPORTUNITY, "Ideas", "#4CAF50"),
    (IdeaCategory.CHALLENGE, "Challenges", "#2196F3"),
    (IdeaCategory.PAIN_POINT, "Pain Points", "#F44336"),
)


def category_chart(ideas: Sequence[Idea]) -> List[ChartBar]:
    """One bar per category, fixed order and colour; values sum to ``len(ideas)``."""

    counts = Counter(idea.category for idea in ideas)
    return [
        ChartBar(name=label, value=counts.get(category, 0), fill=colour)
        for category, label, colour in CATEGORY_CHART
    ]


def status_breakdown(ideas: Sequence[Idea]) -> List[ChartBar]:
    counts = Counter(idea.status for idea in ideas)
    return [ChartBar(name=status.value, value=counts.get(status, 0)) for status in STATUS_ORDER]
