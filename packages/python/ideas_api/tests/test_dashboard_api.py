def _submit(api, title, category="opportunity"):
    resp = api.post(
        "/api/ideas",
        json={
            "title": title,
            "description": "Long enough description for the dashboard tests.",
            "category": category,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_category_chart_and_metrics(api):
    _submit(api, "Idea for the chart")
    _submit(api, "Challenge for the chart", category="challenge")
    _submit(api, "Pain point for the chart", category="pain-point")
    _submit(api, "Second pain point here", category="pain-point")

    chart = api.get("/api/chart/categories").json()
    metrics = api.get("/api/metrics").json()

    assert chart == [
        {"name": "Ideas", "value": 1, "fill": "#4CAF50"},
        {"name": "Challenges", "value": 1, "fill": "#2196F3"},
        {"name": "Pain Points", "value": 2, "fill": "#F44336"},
    ]
    assert metrics["ideas_submitted"] == 4
    assert metrics["in_review"] == 0


def test_volume_and_status_breakdown(api):
    _submit(api, "Volume check idea")

    volume = api.get("/api/ideas/volume").json()
    weekly = api.get("/api/ideas/volume", params={"window": "week", "periods": 3}).json()
    statuses = {bar["name"]: bar["value"] for bar in api.get("/api/ideas/by-status").json()}

    assert len(volume) == 5 and volume[-1]["value"] == 1
    assert sum(point["value"] for point in weekly) == 1 and len(weekly) == 3
    assert statuses["submitted"] == 1
    assert api.get("/api/ideas/volume", params={"window": "year"}).status_code == 422


def test_leaderboard_ranks_submitters(api):
    _submit(api, "Alice first idea")
    api.login("bob", department="Sales")
    _submit(api, "Bob first idea")
    bob_second = _submit(api, "Bob second idea")
    api.login("carol")
    api.post(f"/api/ideas/{bob_second['id']}/vote")

    board = api.get("/api/leaderboard").json()
    sales = api.get("/api/leaderboard", params={"department": "Sales"}).json()

    assert [entry["user"]["id"] for entry in board] == ["bob", "alice"]
    assert board[0]["impact_score"] == 2 * 2 + 1
    assert board[0]["status"] == "New Contributor"
    assert [entry["user"]["id"] for entry in sales] == ["bob"]


def test_leaderboard_rejects_unknown_options(api):
    assert api.get("/api/leaderboard", params={"time_range": "fortnight"}).status_code == 400
    assert api.get("/api/leaderboard", params={"sort_by": "karma"}).status_code == 400


def test_search_groups_by_category(api):
    _submit(api, "Parking sensors")
    _submit(api, "Parking shortage", category="pain-point")
    _submit(api, "Coffee machine upgrade")

    results = api.get("/api/search", params={"q": "parking"}).json()

    assert [idea["title"] for idea in results["ideas"]] == ["Parking sensors"]
    assert [idea["title"] for idea in results["pain_points"]] == ["Parking shortage"]
    assert results["challenges"] == []
    assert api.get("/api/search").status_code == 400


def test_suggestions_need_two_characters(api):
    _submit(api, "Parking sensors")

    assert api.get("/api/search/suggestions", params={"q": "p"}).json() == []
    [suggestion] = api.get("/api/search/suggestions", params={"q": "pa"}).json()
    assert suggestion["title"] == "Parking sensors"
    assert suggestion["category"] == "opportunity"
