"""Ideas repository: domain models, status lifecycle and Mongo persistence."""

from .errors import (
    CommentNotFoundError,
    IdeaNotFoundError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    PermissionDeniedError,
)
from .models import (
    Comment,
    CommentCreate,
    FollowResult,
    Idea,
    IdeaCategory,
    IdeaCreate,
    IdeaStatus,
    IdeaUpdate,
    Submitter,
    Suggestion,
    VoteResult,
)
from .lifecycle import STATUS_ORDER, can_transition, ensure_transition, normalize_status
from .repo import (
    create_idea,
    delete_idea,
    get_idea,
    list_ideas,
    update_idea,
)
from .relations import (
    add_vote,
    follow_idea,
    has_voted,
    is_following,
    list_followed_ideas,
    list_voted_ideas,
    remove_vote,
    unfollow_idea,
)
from .comments import add_comment, list_comments

__all__ = [
    "Comment",
    "CommentCreate",
    "CommentNotFoundError",
    "FollowResult",
    "Idea",
    "IdeaCategory",
    "IdeaCreate",
    "IdeaNotFoundError",
    "IdeaStatus",
    "IdeaUpdate",
    "InvalidStatusError",
    "InvalidStatusTransitionError",
    "PermissionDeniedError",
    "STATUS_ORDER",
    "Submitter",
    "Suggestion",
    "VoteResult",
    "add_comment",
    "add_vote",
    "can_transition",
    "create_idea",
    "delete_idea",
    "ensure_transition",
    "follow_idea",
    "get_idea",
    "has_voted",
    "is_following",
    "list_comments",
    "list_followed_ideas",
    "list_ideas",
    "list_voted_ideas",
    "normalize_status",
    "remove_vote",
    "unfollow_idea",
    "update_idea",
]
