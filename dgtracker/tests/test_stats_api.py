from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from dgtracker.rounds import FinishedRound, RoundStore

BASE_TIME = datetime(2025, 7, 1, 9, 0, tzinfo=timezone.utc)


def _save(store: RoundStore, player: str, index: int, strokes: list[int], rating=None):
    pars = {1: 3, 2: 3, 3: 4}
    store.save(
        FinishedRound(
            id=f"{player}-{index}",
            player_id=player,
            course_id="ekeberg",
            pars=pars,
            scores={"you": dict(zip(pars, strokes))},
            total_strokes=sum(strokes),
            rating=rating,
            started_at=BASE_TIME + timedelta(days=index),
            ended_at=BASE_TIME + timedelta(days=index, hours=1),
        )
    )


@pytest.fixture
def seeded(api_client: TestClient, round_store: RoundStore) -> TestClient:
    _save(round_store, "me", 0, [4, 4, 5], rating=900)
    _save(round_store, "me", 1, [3, 3, 4], rating=1000)
    _save(round_store, "friend", 0, [5, 5, 5])
    return api_client


def test_hole_stats(seeded: TestClient) -> None:
    holes = seeded.get("/api/stats/holes", headers={"x-user-id": "me"}).json()
    assert [h["holeNumber"] for h in holes] == [1, 2, 3]
    assert holes[0]["average"] == pytest.approx(3.5)
    assert holes[0]["pars"] == 1
    assert holes[0]["bogeys"] == 1


def test_insights(seeded: TestClient) -> None:
    insights = seeded.get("/api/stats/insights", headers={"x-user-id": "me"}).json()
    assert insights["totalRounds"] == 2
    assert insights["bestScore"] == 10
    assert insights["averageRating"] == 950
    assert insights["improvement"] == pytest.approx(3.0)

    empty = seeded.get("/api/stats/insights", headers={"x-user-id": "ghost"}).json()
    assert empty["totalRounds"] == 0


def test_compare(seeded: TestClient) -> None:
    resp = seeded.post(
        "/api/stats/compare",
        json={"friends": [{"playerId": "friend", "name": "Friend"}, {"playerId": "me", "name": "Dup"}]},
        headers={"x-user-id": "me"},
    )
    assert resp.status_code == 200
    result = resp.json()
    assert result["totalFriends"] == 1
    assert result["rankByRounds"] == 1
    assert result["rankByAverage"] == 1
    assert result["rankByRating"] == 1
    assert result["betterThanRoundsPct"] == 100
    assert [p["playerId"] for p in result["leaderboard"]] == ["me", "friend"]


def test_health_and_metrics(api_client: TestClient) -> None:
    health = api_client.get("/health").json()
    assert health["status"] == "ok"
    assert health["env"]["finish_policy"] == "last_hole"

    api_client.post("/api/rating", json={"courseId": "ekeberg", "totalScore": 45})
    metrics = api_client.get("/metrics")
    assert metrics.status_code == 200
    assert "requests_total" in metrics.text
    assert 'ratings_computed_total{model="ekeberg"}' in metrics.text
