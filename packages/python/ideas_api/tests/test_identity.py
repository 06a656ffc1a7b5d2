import asyncio

import httpx
import pytest
from fastapi import HTTPException

from ideas_api import identity
from ideas_api.identity import fetch_identity, is_reviewer, user_from_identity


@pytest.fixture()
def whoami(monkeypatch):
    """Route the shared identity client through a handler the test controls."""

    calls = []

    def install(handler):
        def record(request):
            calls.append(request)
            return handler(request)

        monkeypatch.setattr(identity, "_client", httpx.AsyncClient(transport=httpx.MockTransport(record)))
        return calls

    return install


def test_fetch_identity_forwards_cookie(whoami):
    calls = whoami(lambda request: httpx.Response(200, json={"identity": {"id": "u1", "traits": {}}}))

    result = asyncio.run(fetch_identity("ory_session=abc"))

    assert result["id"] == "u1"
    assert calls[0].url.path == "/sessions/whoami"
    assert calls[0].headers["cookie"] == "ory_session=abc"


@pytest.mark.parametrize("status, expected", [(401, 401), (403, 401), (500, 502)])
def test_fetch_identity_maps_failures(whoami, status, expected):
    whoami(lambda request: httpx.Response(status))

    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(fetch_identity("ory_session=abc"))
    assert excinfo.value.status_code == expected


def test_fetch_identity_network_error_is_bad_gateway(whoami):
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    whoami(boom)

    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(fetch_identity("ory_session=abc"))
    assert excinfo.value.status_code == 502


def test_missing_cookie_is_unauthorized():
    from fastapi.testclient import TestClient

    from core_server.main import app

    resp = TestClient(app).get("/api/ideas")

    assert resp.status_code == 401


def test_user_from_identity_reads_traits():
    user = user_from_identity(
        {
            "id": "u1",
            "traits": {
                "name": {"first": "Ada", "last": "Lovelace"},
                "department": " Research ",
                "role": "Reviewer",
            },
        }
    )

    assert user.display_name == "Ada Lovelace"
    assert user.department == "Research"
    assert user.role == "reviewer"
    assert is_reviewer(user)


def test_user_from_identity_defaults():
    user = user_from_identity({"id": 7, "traits": {"email": "x@example.com", "role": "overlord"}})

    assert user.id == "7"
    assert user.display_name == "x@example.com"
    assert user.role == "user"
    assert not is_reviewer(user)
    assert user_from_identity({"id": "u2"}).display_name == "Anonymous"
