from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def test_list_and_get_courses(api_client: TestClient) -> None:
    courses = api_client.get("/api/courses").json()
    assert {c["id"] for c in courses} >= {"ekeberg", "krokhol-blue", "langhus"}
    ekeberg = next(c for c in courses if c["id"] == "ekeberg")
    assert ekeberg["ratingModel"] == "ekeberg"

    resp = api_client.get("/api/courses/langhus")
    assert resp.status_code == 200
    assert resp.json()["holes"] == 18

    resp = api_client.get("/api/courses/nowhere")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "course_not_found"


def test_search_courses(api_client: TestClient) -> None:
    found = api_client.get("/api/courses/search", params={"q": "ekeberg"}).json()
    assert [c["id"] for c in found] == ["ekeberg"]


def test_course_holes(api_client: TestClient) -> None:
    holes = api_client.get("/api/courses/ekeberg/holes").json()
    assert len(holes) == 18
    assert holes[0]["holeNumber"] == 1
    assert holes[0]["par"] == 3
    assert holes[0]["basket"]["lat"] == pytest.approx(59.8942663)

    assert api_client.get("/api/courses/nowhere/holes").status_code == 404


def test_patch_hole_positions(api_client: TestClient) -> None:
    resp = api_client.patch(
        "/api/courses/langhus/holes/1/positions",
        json={"basket": {"lat": 59.76, "lon": 10.85}},
    )
    assert resp.status_code == 200
    assert resp.json()["basket"] == {"lat": 59.76, "lon": 10.85}

    assert (
        api_client.patch("/api/courses/langhus/holes/1/positions", json={}).status_code
        == 400
    )
    resp = api_client.patch(
        "/api/courses/langhus/holes/42/positions",
        json={"tee": {"lat": 1, "lon": 1}},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "hole_not_found"


@pytest.mark.parametrize(
    "course_id, score, rating, model",
    [
        ("ekeberg", 45, 1002, "ekeberg"),
        ("ekeberg", 30, 1182, "ekeberg"),
        ("krokhol-blue", 53, 1075, "krokhol"),
        ("langhus", 40, 1099, "langhus"),
        ("ekeberg", 500, 0, "ekeberg"),
    ],
)
def test_rating_endpoint(
    api_client: TestClient, course_id: str, score: int, rating: int, model: str
) -> None:
    resp = api_client.post(
        "/api/rating", json={"courseId": course_id, "totalScore": score}
    )
    assert resp.status_code == 200
    assert resp.json() == {"rating": rating, "applicable": True, "model": model}


def test_rating_unknown_course(api_client: TestClient) -> None:
    resp = api_client.post("/api/rating", json={"courseId": "nowhere", "totalScore": 54})
    assert resp.status_code == 404


def test_api_key_enforced_when_required(api_client: TestClient, monkeypatch) -> None:
    monkeypatch.setenv("REQUIRE_API_KEY", "1")
    monkeypatch.setenv("API_KEY", "secret,other")

    assert api_client.get("/api/courses").status_code == 401
    assert api_client.get("/api/courses", headers={"x-api-key": "nope"}).status_code == 401
    assert api_client.get("/api/courses", headers={"x-api-key": "secret"}).status_code == 200
    assert api_client.get("/api/courses", params={"apiKey": "other"}).status_code == 200


def test_api_key_used_as_player_id(api_client: TestClient) -> None:
    resp = api_client.post(
        "/api/rounds/live", json={"courseId": "ekeberg"}, headers={"x-api-key": "k1"}
    )
    round_id = resp.json()["roundId"]
    assert (
        api_client.get(
            f"/api/rounds/live/{round_id}", headers={"x-api-key": "k1"}
        ).status_code
        == 200
    )
    assert api_client.get(f"/api/rounds/live/{round_id}").status_code == 403
