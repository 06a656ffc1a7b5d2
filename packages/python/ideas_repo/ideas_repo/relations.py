"""Vote and follow relations between users and ideas.

Both relations are plain existence records, one document per (user, idea)
pair. The document id is derived from the pair so MongoDB's unique ``_id``
rejects duplicates.
"""

from __future__ import annotations

from typing import List

from loguru import logger
from pymongo.errors import DuplicateKeyError

from db_core import get_db

from .models import FollowResult, Idea, VoteResult, utcnow
from .repo import (
    FOLLOWS_COLLECTION,
    VOTES_COLLECTION,
    adjust_votes,
    get_idea,
    list_ideas_by_ids,
)


def _relation_id(user_id: str, idea_id: str) -> str:
    return f"{user_id}:{idea_id}"


async def _insert_relation(collection_name: str, user_id: str, idea_id: str) -> bool:
    try:
        await get_db()[collection_name].insert_one(
            {
                "_id": _relation_id(user_id, idea_id),
                "user_id": user_id,
                "idea_id": idea_id,
                "created_at": utcnow(),
            }
        )
    except DuplicateKeyError:
        return False
    return True


async def _delete_relation(collection_name: str, user_id: str, idea_id: str) -> bool:
    result = await get_db()[collection_name].delete_one({"_id": _relation_id(user_id, idea_id)})
    return bool(result.deleted_count)


async def _relation_exists(collection_name: str, user_id: str, idea_id: str) -> bool:
    doc = await get_db()[collection_name].find_one({"_id": _relation_id(user_id, idea_id)})
    return doc is not None


async def _related_ideas(collection_name: str, user_id: str) -> List[Idea]:
    cursor = get_db()[collection_name].find({"user_id": user_id})
    idea_ids = [doc["idea_id"] async for doc in cursor]
    return await list_ideas_by_ids(idea_ids)


# ---------------------------------------------------------------------------
# Votes
# ---------------------------------------------------------------------------


async def add_vote(idea_id: str, user_id: str) -> VoteResult:
    """Record a vote; voting twice leaves the count unchanged."""

    await get_idea(idea_id)
    if not await _insert_relation(VOTES_COLLECTION, user_id, idea_id):
        return VoteResult(idea=await get_idea(idea_id), voted=True, changed=False)

    idea = await adjust_votes(idea_id, 1)
    logger.info("User {user_id} voted for idea {idea_id}", user_id=user_id, idea_id=idea_id)
    return VoteResult(idea=idea, voted=True, changed=True)


async def remove_vote(idea_id: str, user_id: str) -> VoteResult:
    await get_idea(idea_id)
    if not await _delete_relation(VOTES_COLLECTION, user_id, idea_id):
        return VoteResult(idea=await get_idea(idea_id), voted=False, changed=False)

    idea = await adjust_votes(idea_id, -1)
    logger.info("User {user_id} removed vote from idea {idea_id}", user_id=user_id, idea_id=idea_id)
    return VoteResult(idea=idea, voted=False, changed=True)


async def has_voted(idea_id: str, user_id: str) -> bool:
    return await _relation_exists(VOTES_COLLECTION, user_id, idea_id)


async def list_voted_ideas(user_id: str) -> List[Idea]:
    return await _related_ideas(VOTES_COLLECTION, user_id)


# ---------------------------------------------------------------------------
# Follows
# ---------------------------------------------------------------------------


async def follow_idea(idea_id: str, user_id: str) -> FollowResult:
    await get_idea(idea_id)
    changed = await _insert_relation(FOLLOWS_COLLECTION, user_id, idea_id)
    if changed:
        logger.info("User {user_id} follows idea {idea_id}", user_id=user_id, idea_id=idea_id)
    return FollowResult(idea_id=idea_id, followed=True, changed=changed)


async def unfollow_idea(idea_id: str, user_id: str) -> FollowResult:
    await get_idea(idea_id)
    changed = await _delete_relation(FOLLOWS_COLLECTION, user_id, idea_id)
    if changed:
        logger.info("User {user_id} unfollowed idea {idea_id}", user_id=user_id, idea_id=idea_id)
    return FollowResult(idea_id=idea_id, followed=False, changed=changed)


async def is_following(idea_id: str, user_id: str) -> bool:
    return await _relation_exists(FOLLOWS_COLLECTION, user_id, idea_id)


async def list_followed_ideas(user_id: str) -> List[Idea]:
    return await _related_ideas(FOLLOWS_COLLECTION, user_id)
