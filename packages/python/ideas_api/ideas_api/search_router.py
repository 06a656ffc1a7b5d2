"""Full-text-ish search across ideas, challenges and pain points."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ideas_repo import IdeaCategory, Submitter, Suggestion, list_ideas

from .identity import get_current_user
from .schemas import SearchResults

router = APIRouter(prefix="/api/search", tags=["search"])

SUGGESTION_MIN_LENGTH = 2
SUGGESTION_LIMIT = 5


@router.get("", response_model=SearchResults)
async def search(
    q: str | None = Query(default=None),
    _: Submitter = Depends(get_current_user),
):
    """Case-insensitive title/description match grouped by category."""

    if not q or not q.strip():
        raise HTTPException(status_code=400, detail='Query parameter "q" is required')

    results = SearchResults()
    for idea in await list_ideas(search=q):
        if idea.category == IdeaCategory.CHALLENGE:
            results.challenges.append(idea)
        elif idea.category == IdeaCategory.PAIN_POINT:
            results.pain_points.append(idea)
        else:
            results.ideas.append(idea)
    return results


@router.get("/suggestions", response_model=list[Suggestion])
async def suggestions(
    q: str = Query(default=""),
    _: Submitter = Depends(get_current_user),
):
    if len(q.strip()) < SUGGESTION_MIN_LENGTH:
        return []
    ideas = await list_ideas(search=q, limit=SUGGESTION_LIMIT)
    return [Suggestion(id=idea.id, title=idea.title, category=idea.category.value) for idea in ideas]
