"""Group a flat comment list into one-level threads."""

from __future__ import annotations

from typing import Dict, List, Sequence

from pydantic import BaseModel, Field

from ideas_repo.models import Comment


class CommentThread(BaseModel):
    comment: Comment
    replies: List[Comment] = Field(default_factory=list)


def group_comments(comments: Sequence[Comment]) -> List[CommentThread]:
    """Top-level comments in order, each with its replies; orphaned replies are dropped."""

    threads: Dict[str, CommentThread] = {}
    for comment in comments:
        if not comment.parent_id:
            threads[comment.id] = CommentThread(comment=comment)
    for comment in comments:
        if comment.parent_id and comment.parent_id in threads:
            threads[comment.parent_id].replies.append(comment)
    return list(threads.values())
