import importlib
from pathlib import Path

import pytest


def _submit(api, **overrides):
    body = {
        "title": "Automate invoice matching",
        "description": "Match incoming invoices to purchase orders automatically.",
        "category": "opportunity",
    }
    body.update(overrides)
    resp = api.post("/api/ideas", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_submit_and_fetch_detail(api):
    created = _submit(api, tags=["finance"])

    assert created["status"] == "submitted"
    assert created["votes"] == 0
    assert created["submitter"]["display_name"] == "Alice"
    assert created["department"] == "Engineering"

    detail = api.get(f"/api/ideas/{created['id']}").json()
    assert detail["voted"] is False
    assert detail["followed"] is False
    assert [step["state"] for step in detail["tracker"]][:2] == ["current", "pending"]


@pytest.mark.parametrize(
    "overrides",
    [{"title": "Tiny"}, {"description": "short"}, {"category": "rant"}],
)
def test_invalid_submission_is_rejected(api, overrides, stub_db):
    body = {
        "title": "Automate invoice matching",
        "description": "Match incoming invoices to purchase orders automatically.",
        "category": "opportunity",
    }
    body.update(overrides)

    resp = api.post("/api/ideas", json=body)

    assert resp.status_code == 422
    assert not stub_db["ideas"].docs


def test_multipart_submission_stores_media(api, tmp_path):
    resp = api.post(
        "/api/ideas",
        data={
            "title": "Voice note intake",
            "description": "Let people record a voice note instead of typing.",
            "category": "pain-point",
            "tags": '["voice", "intake"]',
            "root_cause": "Typing on mobile is slow",
        },
        files=[("media", ("note.webm", b"audio-bytes", "audio/webm"))],
    )

    assert resp.status_code == 201, resp.text
    idea = resp.json()
    assert idea["tags"] == ["voice", "intake"]
    [url] = idea["media_urls"]
    assert url.startswith("/media/") and url.endswith(".webm")
    assert (Path(tmp_path / "media") / url.rsplit("/", 1)[1]).read_bytes() == b"audio-bytes"


def test_missing_idea_is_404(api):
    assert api.get("/api/ideas/missing").status_code == 404
    assert api.post("/api/ideas/missing/vote").status_code == 404


def test_list_filters_and_mine(api):
    _submit(api)
    api.login("bob", department="Sales")
    _submit(api, title="Slow expense approvals", category="pain-point")

    assert len(api.get("/api/ideas").json()) == 2
    mine = api.get("/api/ideas", params={"mine": "true"}).json()
    assert [idea["submitter_id"] for idea in mine] == ["bob"]
    pain = api.get("/api/ideas", params={"category": "pain-point"}).json()
    assert [idea["title"] for idea in pain] == ["Slow expense approvals"]
    assert api.get("/api/ideas", params={"status": "bogus"}).status_code == 422


def test_vote_toggle_round_trip(api):
    idea = _submit(api)
    api.login("bob")

    voted = api.post(f"/api/ideas/{idea['id']}/vote").json()
    again = api.post(f"/api/ideas/{idea['id']}/vote").json()
    assert voted["idea"]["votes"] == 1 and voted["changed"] is True
    assert again["idea"]["votes"] == 1 and again["changed"] is False
    assert api.get(f"/api/ideas/{idea['id']}").json()["voted"] is True
    assert [item["id"] for item in api.get("/api/ideas/my-votes").json()] == [idea["id"]]

    unvoted = api.delete(f"/api/ideas/{idea['id']}/vote").json()
    assert unvoted["idea"]["votes"] == 0 and unvoted["voted"] is False


def test_follow_endpoints(api):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}/follow"

    assert api.get(path).json() == {"idea_id": idea["id"], "followed": False}
    assert api.post(path).json()["followed"] is True
    assert api.get(path).json()["followed"] is True
    assert [item["id"] for item in api.get("/api/ideas/my-follows").json()] == [idea["id"]]
    assert api.delete(path).json()["followed"] is False


def test_status_change_needs_reviewer(api):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}"

    assert api.patch(path, json={"status": "in-review"}).status_code == 403

    api.login("rita", role="reviewer")
    resp = api.patch(path, json={"status": "in-review"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "in-review"


def test_backward_status_change_is_conflict(api):
    idea = _submit(api)
    api.login("rita", role="implementer")
    path = f"/api/ideas/{idea['id']}"
    api.patch(path, json={"status": "implemented"})

    resp = api.patch(path, json={"status": "submitted"})

    assert resp.status_code == 409
    assert "implemented" in resp.json()["detail"]


def test_unknown_status_is_bad_request(api):
    idea = _submit(api)
    api.login("ada", role="admin")
    assert api.patch(f"/api/ideas/{idea['id']}", json={"status": "archived"}).status_code == 400


def test_owner_edits_but_others_cannot(api):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}"

    assert api.patch(path, json={"title": "Automate invoice matching v2"}).json()["title"] == (
        "Automate invoice matching v2"
    )
    api.login("bob")
    assert api.patch(path, json={"title": "Not my idea at all"}).status_code == 403


def test_delete_requires_admin(api, stub_db):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}"

    api.login("rita", role="reviewer")
    assert api.delete(path).status_code == 403

    api.login("ada", role="admin")
    assert api.delete(path).status_code == 204
    assert not stub_db["ideas"].docs
    assert api.get(path).status_code == 404


def test_review_queue_lists_submitted_with_sla(api):
    first = _submit(api)
    second = _submit(api, title="Second thought here")
    api.login("rita", role="reviewer")
    api.patch(f"/api/ideas/{second['id']}", json={"status": "in-review"})
    third = _submit(api, title="Third thought here")

    queue = api.get("/api/ideas/review").json()

    assert [item["idea"]["id"] for item in queue] == [first["id"], third["id"]]
    # Any part of a started day counts as a day open.
    assert queue[0]["sla"] == {"label": "2 days left", "tone": "ok", "days_open": 1}

    api.login("bob")
    assert api.get("/api/ideas/review").status_code == 403


def test_comments_flat_and_threaded(api):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}/comments"

    top = api.post(path, json={"content": "Great idea"})
    assert top.status_code == 201
    reply = api.post(path, json={"content": "Agreed", "parent_id": top.json()["id"]}).json()
    api.post(path, json={"content": "Me too", "parent_id": reply["id"]})

    flat = api.get(path).json()
    threaded = api.get(path, params={"threaded": "true"}).json()

    assert [comment["content"] for comment in flat] == ["Great idea", "Agreed", "Me too"]
    assert len(threaded) == 1
    assert threaded[0]["comment"]["content"] == "Great idea"
    assert [r["content"] for r in threaded[0]["replies"]] == ["Agreed", "Me too"]


def test_comment_with_unknown_parent_is_404(api):
    idea = _submit(api)
    resp = api.post(f"/api/ideas/{idea['id']}/comments", json={"content": "Hi", "parent_id": "nope"})
    assert resp.status_code == 404


def test_top_and_recent(api):
    ideas = [_submit(api, title=f"Idea number {n}") for n in range(7)]
    api.login("bob")
    api.post(f"/api/ideas/{ideas[3]['id']}/vote")

    top = api.get("/api/ideas/top").json()
    recent = api.get("/api/ideas/recent-activity").json()

    assert top[0]["id"] == ideas[3]["id"]
    assert [idea["id"] for idea in recent] == [idea["id"] for idea in reversed(ideas)][:5]


@pytest.mark.parametrize("field", ["title", "description", "tags"])
def test_null_for_required_field_is_rejected(api, field):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}"

    assert api.patch(path, json={field: None}).status_code == 422

    fetched = api.get(path)
    assert fetched.status_code == 200
    assert fetched.json()["title"] == idea["title"]
    assert fetched.json()["tags"] == idea["tags"]


def test_blank_title_edit_is_rejected_and_padding_trimmed(api):
    idea = _submit(api)
    path = f"/api/ideas/{idea['id']}"

    assert api.patch(path, json={"title": "       "}).status_code == 422
    assert api.patch(path, json={"title": "  Renamed idea  "}).json()["title"] == "Renamed idea"


def test_failed_insert_discards_uploaded_media(api, tmp_path, monkeypatch):
    async def failing_create(*args, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(importlib.import_module("ideas_api.router"), "create_idea", failing_create)

    with pytest.raises(RuntimeError):
        api.post(
            "/api/ideas",
            data={
                "title": "Voice note intake",
                "description": "Let people record a voice note instead of typing.",
                "category": "opportunity",
            },
            files=[("media", ("note.webm", b"audio-bytes", "audio/webm"))],
        )

    assert list((tmp_path / "media").iterdir()) == []
