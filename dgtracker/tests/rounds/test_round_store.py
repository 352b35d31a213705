from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from dgtracker.rounds import FinishedRound, RoundNotFound, RoundOwnershipError, RoundStore
from dgtracker.rounds.service import _sanitize_id

BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _finished(round_id: str, *, player: str = "p1", course: str = "ekeberg", hours: int = 0, total: int = 54):
    return FinishedRound(
        id=round_id,
        player_id=player,
        course_id=course,
        course_name=course.title(),
        participant_ids=["you"],
        pars={1: 3, 2: 3},
        scores={"you": {1: 2, 2: 4}},
        total_strokes=total,
        rating=None,
        started_at=BASE_TIME + timedelta(hours=hours),
        ended_at=BASE_TIME + timedelta(hours=hours, minutes=90),
    )


def test_save_and_get_roundtrip(round_store: RoundStore) -> None:
    saved = round_store.save(_finished("r1"))
    path = round_store.base_dir / "p1" / "r1.json"
    assert path.exists()
    payload = json.loads(path.read_text())
    assert payload["playerId"] == "p1"
    assert payload["totalStrokes"] == 54

    loaded = round_store.get("r1")
    assert loaded.model_dump() == saved.model_dump()
    assert loaded.strokes_for("you") == {1: 2, 2: 4}
    assert loaded.par_total == 6


def test_get_checks_owner(round_store: RoundStore) -> None:
    round_store.save(_finished("r1"))
    assert round_store.get("r1", player_id="p1").id == "r1"
    with pytest.raises(RoundOwnershipError):
        round_store.get("r1", player_id="p2")
    with pytest.raises(RoundNotFound):
        round_store.get("missing")


def test_list_rounds_newest_first_and_filters(round_store: RoundStore) -> None:
    round_store.save(_finished("old", hours=0))
    round_store.save(_finished("new", hours=48))
    round_store.save(_finished("mid", hours=24, course="langhus"))
    round_store.save(_finished("other", player="p2"))

    assert [r.id for r in round_store.list_rounds("p1")] == ["new", "mid", "old"]
    assert [r.id for r in round_store.list_rounds("p1", course_id="langhus")] == ["mid"]
    assert [r.id for r in round_store.list_rounds("p1", limit=2)] == ["new", "mid"]
    assert round_store.list_rounds("nobody") == []


def test_unreadable_files_are_skipped(round_store: RoundStore, caplog) -> None:
    round_store.save(_finished("good"))
    (round_store.base_dir / "p1" / "broken.json").write_text("{not json")
    (round_store.base_dir / "p1" / "invalid.json").write_text(json.dumps({"id": "x"}))

    assert [r.id for r in round_store.list_rounds("p1")] == ["good"]
    assert "unreadable round file" in caplog.text


@pytest.mark.parametrize("bad", ["../etc", "a/b", "", "name with space"])
def test_ids_are_sanitized(round_store: RoundStore, bad: str) -> None:
    with pytest.raises(ValueError):
        _sanitize_id(bad)
    with pytest.raises(ValueError):
        round_store.list_rounds(bad)


def test_default_base_dir_from_settings(monkeypatch, tmp_path) -> None:
    from dgtracker.config import reset_settings_cache

    monkeypatch.setenv("DGTRACKER_ROUNDS_DIR", str(tmp_path / "custom"))
    reset_settings_cache()
    store = RoundStore()
    assert store.base_dir == (tmp_path / "custom").resolve()
