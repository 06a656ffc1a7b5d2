"""Minimal MongoDB helpers shared by the ideas repositories.

Example usage in a domain repository:

    from db_core import get_db

    async def list_ideas():
        db = get_db()
        cursor = db["ideas"].find({"category": "challenge"}).sort("created_at", -1)
        return await cursor.to_list(length=100)
"""

from .settings import MongoSettings, settings
from .mongo import get_mongo_client, get_db, ping, ensure_indexes
from .typing import MongoDocument

__all__ = [
    "MongoSettings",
    "MongoDocument",
    "settings",
    "get_mongo_client",
    "get_db",
    "ping",
    "ensure_indexes",
]
