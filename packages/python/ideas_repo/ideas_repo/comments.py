"""Comment persistence for ideas (one level of replies)."""

from __future__ import annotations

from typing import List
from uuid import uuid4

from loguru import logger

from db_core import MongoDocument, get_db

from .errors import CommentNotFoundError
from .models import Comment, CommentCreate, Submitter, utcnow
from .repo import COMMENTS_COLLECTION, get_idea


def _collection():
    return get_db()[COMMENTS_COLLECTION]


def _doc_to_model(doc: MongoDocument) -> Comment:
    payload = {key: value for key, value in doc.items() if key != "_id"}
    payload["id"] = str(doc.get("_id") or doc["id"])
    return Comment.model_validate(payload)


async def _resolve_parent(idea_id: str, parent_id: str) -> str:
    parent = await _collection().find_one({"_id": parent_id, "idea_id": idea_id})
    if not parent:
        raise CommentNotFoundError(f"Comment {parent_id} not found on idea {idea_id}")
    # Replies to replies hang off the top-level comment.
    return parent.get("parent_id") or parent_id


async def add_comment(idea_id: str, submitter: Submitter, payload: CommentCreate) -> Comment:
    await get_idea(idea_id)

    parent_id = None
    if payload.parent_id:
        parent_id = await _resolve_parent(idea_id, payload.parent_id)

    doc = {
        "_id": uuid4().hex,
        "idea_id": idea_id,
        "content": payload.content,
        "submitter_id": submitter.id,
        "submitter": submitter.model_dump(),
        "parent_id": parent_id,
        "created_at": utcnow(),
    }
    await _collection().insert_one(doc)
    logger.info(
        "Comment {comment_id} added to idea {idea_id} by {user_id}",
        comment_id=doc["_id"],
        idea_id=idea_id,
        user_id=submitter.id,
    )
    return _doc_to_model(doc)


async def list_comments(idea_id: str) -> List[Comment]:
    """Flat comment list for an idea, oldest first."""

    await get_idea(idea_id)
    cursor = _collection().find({"idea_id": idea_id}).sort("created_at", 1)
    return [_doc_to_model(doc) async for doc in cursor]
