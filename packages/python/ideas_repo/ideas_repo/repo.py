"""Async persistence layer for ideas."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional
from uuid import uuid4

from loguru import logger
from pymongo import ReturnDocument

from db_core import MongoDocument, get_db

from .errors import IdeaNotFoundError, PermissionDeniedError
from .lifecycle import ensure_transition
from .models import REVIEWER_FIELDS, Idea, IdeaCreate, IdeaUpdate, Submitter, utcnow

COLLECTION_NAME = "ideas"
COMMENTS_COLLECTION = "comments"
VOTES_COLLECTION = "idea_votes"
FOLLOWS_COLLECTION = "idea_follows"

SORT_FIELDS = {
    "title": "title",
    "category": "category",
    "status": "status",
    "votes": "votes",
    "department": "department",
    "priority": "priority",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}
DEFAULT_SORT = "created_at"


def _collection():
    return get_db()[COLLECTION_NAME]


def _doc_to_model(doc: MongoDocument) -> Idea:
    payload = {key: value for key, value in doc.items() if key != "_id"}
    payload["id"] = str(doc.get("_id") or doc["id"])
    return Idea.model_validate(payload)


async def create_idea(
    submitter: Submitter,
    payload: IdeaCreate,
    media_urls: Optional[List[str]] = None,
) -> Idea:
    """Persist a new submission; status starts at ``submitted`` with no votes."""

    now = utcnow()
    doc = payload.model_dump(mode="json")
    doc.update(
        {
            "_id": uuid4().hex,
            "status": "submitted",
            "votes": 0,
            "submitter_id": submitter.id,
            "submitter": submitter.model_dump(),
            "created_at": now,
            "updated_at": now,
            "media_urls": list(media_urls or []),
            "department": payload.department or submitter.department,
        }
    )
    await _collection().insert_one(doc)
    logger.info(
        "Idea {idea_id} ({category}) submitted by {user_id}",
        idea_id=doc["_id"],
        category=doc["category"],
        user_id=submitter.id,
    )
    return _doc_to_model(doc)


async def get_idea(idea_id: str) -> Idea:
    doc = await _collection().find_one({"_id": idea_id})
    if not doc:
        raise IdeaNotFoundError(f"Idea {idea_id} not found")
    return _doc_to_model(doc)


def _build_filter(
    status: Optional[str] = None,
    category: Optional[str] = None,
    submitter_id: Optional[str] = None,
    search: Optional[str] = None,
) -> dict:
    query: dict = {}
    if status:
        query["status"] = status
    if category:
        query["category"] = category
    if submitter_id:
        query["submitter_id"] = submitter_id
    if search:
        pattern = re.escape(search.strip())
        query["$or"] = [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]
    return query


async def list_ideas(
    *,
    status: Optional[str] = None,
    category: Optional[str] = None,
    submitter_id: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_direction: str = "desc",
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Idea]:
    """List ideas matching the filters, most recent first unless told otherwise."""

    field = SORT_FIELDS.get(sort_by or DEFAULT_SORT, DEFAULT_SORT)
    direction = 1 if sort_direction == "asc" else -1
    cursor = _collection().find(_build_filter(status, category, submitter_id, search)).sort(field, direction)
    if offset:
        cursor = cursor.skip(offset)
    if limit:
        cursor = cursor.limit(limit)
    docs = [doc async for doc in cursor]
    return [_doc_to_model(doc) for doc in docs]


async def list_ideas_by_ids(idea_ids: Iterable[str]) -> List[Idea]:
    ids = list(idea_ids)
    if not ids:
        return []
    cursor = _collection().find({"_id": {"$in": ids}}).sort("created_at", -1)
    docs = [doc async for doc in cursor]
    return [_doc_to_model(doc) for doc in docs]


async def update_idea(
    idea_id: str,
    user_id: str,
    payload: IdeaUpdate,
    *,
    is_reviewer: bool = False,
) -> Idea:
    """
    Apply a partial update.

    Submitters may edit their own content fields. Status and the
    reviewer-managed fields need a reviewer role; status changes must move
    forward along the lifecycle.
    """

    current = await get_idea(idea_id)
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        return current

    if not is_reviewer:
        if current.submitter_id != user_id:
            raise PermissionDeniedError(f"User {user_id} cannot edit idea {idea_id}")
        restricted = sorted(REVIEWER_FIELDS.intersection(changes))
        if restricted:
            raise PermissionDeniedError(f"Only reviewers may change: {', '.join(restricted)}")

    if changes.get("status") is not None:
        target = ensure_transition(current.status, changes["status"])
        changes["status"] = target.value
    else:
        changes.pop("status", None)

    changes["updated_at"] = utcnow()
    doc = await _collection().find_one_and_update(
        {"_id": idea_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise IdeaNotFoundError(f"Idea {idea_id} not found")

    if "status" in changes:
        logger.info(
            "Idea {idea_id} moved {old} -> {new} by {user_id}",
            idea_id=idea_id,
            old=current.status.value,
            new=changes["status"],
            user_id=user_id,
        )
    return _doc_to_model(doc)


async def adjust_votes(idea_id: str, delta: int) -> Idea:
    doc = await _collection().find_one_and_update(
        {"_id": idea_id},
        {"$inc": {"votes": delta}, "$set": {"updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise IdeaNotFoundError(f"Idea {idea_id} not found")
    return _doc_to_model(doc)


async def delete_idea(idea_id: str) -> None:
    """Hard-delete an idea with its comments, votes and follows."""

    result = await _collection().delete_one({"_id": idea_id})
    if not result.deleted_count:
        raise IdeaNotFoundError(f"Idea {idea_id} not found")

    db = get_db()
    for name in (COMMENTS_COLLECTION, VOTES_COLLECTION, FOLLOWS_COLLECTION):
        await db[name].delete_many({"idea_id": idea_id})
    logger.info("Idea {idea_id} deleted", idea_id=idea_id)
