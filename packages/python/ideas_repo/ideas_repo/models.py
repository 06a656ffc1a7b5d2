"""Pydantic models describing ideas, comments and the vote/follow relations."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 20


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what Motor hands back by default."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class IdeaCategory(str, Enum):
    OPPORTUNITY = "opportunity"
    CHALLENGE = "challenge"
    PAIN_POINT = "pain-point"


class IdeaStatus(str, Enum):
    SUBMITTED = "submitted"
    IN_REVIEW = "in-review"
    IN_REFINEMENT = "in-refinement"
    PARKED = "parked"
    IMPLEMENTED = "implemented"
    CLOSED = "closed"


class Submitter(BaseModel):
    """Display snapshot of the user who created an idea or comment."""

    id: str
    display_name: str = "Anonymous"
    department: Optional[str] = None
    role: str = "user"


def parse_tags(value) -> List[str]:
    """Accept a list, a JSON array string or a comma separated string."""

    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        if isinstance(decoded, list):
            value = decoded
        else:
            value = text.split(",")
    return [str(tag).strip() for tag in value if str(tag).strip()]


class Idea(BaseModel):
    """Representation of an idea, challenge or pain point stored in MongoDB."""

    id: str
    title: str
    description: str
    category: IdeaCategory
    status: IdeaStatus = IdeaStatus.SUBMITTED
    votes: int = 0
    submitter_id: str
    submitter: Optional[Submitter] = None
    created_at: datetime
    updated_at: datetime
    tags: List[str] = Field(default_factory=list)
    media_urls: List[str] = Field(default_factory=list)

    department: Optional[str] = None
    priority: Optional[str] = None
    impact: Optional[str] = None
    inspiration: Optional[str] = None
    similar_solutions: Optional[str] = None
    organization_category: Optional[str] = None

    # challenge / pain-point specifics
    criteria: Optional[str] = None
    timeframe: Optional[str] = None
    reward: Optional[str] = None
    urgency: Optional[str] = None
    root_cause: Optional[str] = None

    # reviewer-managed
    assigned_to_id: Optional[str] = None
    admin_notes: Optional[str] = None
    impact_score: Optional[int] = None
    cost_saved: Optional[int] = None
    revenue_generated: Optional[int] = None


class IdeaCreate(BaseModel):
    """Payload for submitting a new idea, challenge or pain point."""

    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=DESCRIPTION_MIN_LENGTH)
    category: IdeaCategory
    tags: List[str] = Field(default_factory=list)
    department: Optional[str] = None
    priority: Optional[str] = "medium"
    impact: Optional[str] = None
    inspiration: Optional[str] = None
    similar_solutions: Optional[str] = None
    organization_category: Optional[str] = None
    criteria: Optional[str] = None
    timeframe: Optional[str] = None
    reward: Optional[str] = None
    urgency: Optional[str] = None
    root_cause: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return parse_tags(value)


# Fields only reviewer roles may change through ``IdeaUpdate``.
REVIEWER_FIELDS = frozenset(
    {"status", "assigned_to_id", "admin_notes", "impact_score", "cost_saved", "revenue_generated"}
)


class IdeaUpdate(BaseModel):
    """Partial update of an idea; unset fields are left untouched."""

    title: Optional[str] = Field(default=None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, min_length=DESCRIPTION_MIN_LENGTH)
    tags: Optional[List[str]] = None
    department: Optional[str] = None
    priority: Optional[str] = None
    impact: Optional[str] = None
    inspiration: Optional[str] = None
    similar_solutions: Optional[str] = None
    organization_category: Optional[str] = None
    criteria: Optional[str] = None
    timeframe: Optional[str] = None
    reward: Optional[str] = None
    urgency: Optional[str] = None
    root_cause: Optional[str] = None

    status: Optional[str] = None
    assigned_to_id: Optional[str] = None
    admin_notes: Optional[str] = None
    impact_score: Optional[int] = None
    cost_saved: Optional[int] = None
    revenue_generated: Optional[int] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return None if value is None else parse_tags(value)

    # Omitted is fine; an explicit null would blank a required field.
    @field_validator("title", "description", "tags")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value


class Comment(BaseModel):
    id: str
    idea_id: str
    content: str
    submitter_id: str
    submitter: Optional[Submitter] = None
    parent_id: Optional[str] = None
    created_at: datetime


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    parent_id: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class Suggestion(BaseModel):
    """Title-only search hit for type-ahead."""

    id: str
    title: str
    category: str


class VoteResult(BaseModel):
    """Outcome of a vote toggle: the idea afterwards and whether anything changed."""

    idea: Idea
    voted: bool
    changed: bool


class FollowResult(BaseModel):
    idea_id: str
    followed: bool
    changed: bool
