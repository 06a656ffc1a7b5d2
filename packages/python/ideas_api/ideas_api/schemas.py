"""Response shapes composed from repository models and analytics views."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ideas_analytics import SlaStatus, TrackerStep
from ideas_repo import Idea


class IdeaDetail(Idea):
    tracker: List[TrackerStep] = Field(default_factory=list)
    voted: bool = False
    followed: bool = False


class ReviewItem(BaseModel):
    idea: Idea
    sla: SlaStatus


class FollowState(BaseModel):
    idea_id: str
    followed: bool


class SearchResults(BaseModel):
    ideas: List[Idea] = Field(default_factory=list)
    challenges: List[Idea] = Field(default_factory=list)
    pain_points: List[Idea] = Field(default_factory=list)
