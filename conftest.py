import copy
import re
from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError


def _sort_key(value):
    return (value is not None, value)


def _matches(doc, query):
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in condition):
                return False
            continue

        value = doc.get(key)
        if isinstance(condition, dict) and any(op.startswith("$") for op in condition):
            for op, arg in condition.items():
                if op == "$options":
                    continue
                if op == "$in":
                    ok = value in arg
                elif op == "$regex":
                    flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                    ok = isinstance(value, str) and re.search(arg, value, flags) is not None
                elif op == "$gte":
                    ok = value is not None and value >= arg
                elif op == "$lt":
                    ok = value is not None and value < arg
                else:
                    raise NotImplementedError(op)
                if not ok:
                    return False
        elif value != condition:
            return False
    return True


class StubCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs = sorted(self._docs, key=lambda doc: _sort_key(doc.get(key)), reverse=direction < 0)
        return self

    def skip(self, count):
        self._docs = self._docs[count:]
        return self

    def limit(self, count):
        if count:
            self._docs = self._docs[:count]
        return self

    async def to_list(self, length=None):
        return list(self._docs[:length] if length else self._docs)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


class StubCollection:
    """In-memory stand-in for the handful of Motor calls the repositories make."""

    def __init__(self):
        self.docs = {}
        self.indexes = []

    async def insert_one(self, doc):
        if doc["_id"] in self.docs:
            raise DuplicateKeyError(f"duplicate _id {doc['_id']}")
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, query):
        for doc in self.docs.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return StubCursor([copy.deepcopy(doc) for doc in self.docs.values() if _matches(doc, query or {})])

    async def find_one_and_update(self, query, update, return_document=None, upsert=False):
        for doc in self.docs.values():
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                for field, delta in update.get("$inc", {}).items():
                    doc[field] = doc.get(field, 0) + delta
                return copy.deepcopy(doc)
        return None

    async def delete_one(self, query):
        for key, doc in list(self.docs.items()):
            if _matches(doc, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        doomed = [key for key, doc in self.docs.items() if _matches(doc, query)]
        for key in doomed:
            del self.docs[key]
        return SimpleNamespace(deleted_count=len(doomed))

    async def create_index(self, keys):
        self.indexes.append(list(keys))
        return "_".join(f"{field}_{direction}" for field, direction in keys)


class StubDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, StubCollection())

    async def command(self, name):
        return {"ok": 1.0}


@pytest.fixture()
def stub_db(monkeypatch):
    db = StubDatabase()
    for module in ("db_core.mongo", "ideas_repo.repo", "ideas_repo.relations", "ideas_repo.comments"):
        monkeypatch.setattr(f"{module}.get_db", lambda: db)
    return db


def make_identity(user_id="alice", role="user", department="Engineering", display_name=None):
    return {
        "id": user_id,
        "traits": {
            "display_name": display_name or user_id.title(),
            "department": department,
            "role": role,
        },
    }


class ApiSession:
    """TestClient plus a switchable identity standing in for the Kratos session."""

    def __init__(self, client, current):
        self.client = client
        self._current = current

    def login(self, user_id, **traits):
        self._current["identity"] = make_identity(user_id, **traits)

    def __getattr__(self, name):
        return getattr(self.client, name)


@pytest.fixture()
def api(stub_db, tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from core_server.main import app
    from ideas_api.config import settings as api_settings
    from ideas_api.identity import get_identity

    monkeypatch.setattr(api_settings, "media_dir", str(tmp_path / "media"))
    current = {"identity": make_identity()}
    app.dependency_overrides[get_identity] = lambda: current["identity"]
    yield ApiSession(TestClient(app), current)
    app.dependency_overrides.clear()
