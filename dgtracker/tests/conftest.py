"""Shared pytest fixtures for tracker tests."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient

from dgtracker.app import app
from dgtracker.config import reset_settings_cache
from dgtracker.courses import HoleSpec
from dgtracker.rounds import (
    LiveRoundRegistry,
    RoundStore,
    get_live_round_registry,
    get_round_store,
)
from dgtracker.telemetry import set_round_telemetry_emitter


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "DGTRACKER_ROUNDS_DIR",
        "DGTRACKER_FINISH_POLICY",
        "DGTRACKER_NEAR_BASKET_M",
        "DGTRACKER_LIVE_ROUND_TTL_H",
        "REQUIRE_API_KEY",
        "API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def make_holes() -> Callable[[Sequence[int]], List[HoleSpec]]:
    def _make(pars: Sequence[int], course_id: str = "test-course") -> List[HoleSpec]:
        return [
            HoleSpec(course_id=course_id, number=i + 1, par=par, distance_m=80.0)
            for i, par in enumerate(pars)
        ]

    return _make


@pytest.fixture
def telemetry_events() -> List[Tuple[str, Dict[str, object]]]:
    events: List[Tuple[str, Dict[str, object]]] = []
    set_round_telemetry_emitter(lambda event, payload: events.append((event, dict(payload))))
    yield events
    set_round_telemetry_emitter(None)


@pytest.fixture
def round_store(tmp_path) -> RoundStore:
    return RoundStore(base_dir=tmp_path / "rounds")


@pytest.fixture
def registry(round_store: RoundStore) -> LiveRoundRegistry:
    return LiveRoundRegistry(round_store, finish_policy="last_hole", near_basket_m=500.0)


@pytest.fixture
def api_client(round_store: RoundStore, registry: LiveRoundRegistry):
    app.dependency_overrides[get_round_store] = lambda: round_store
    app.dependency_overrides[get_live_round_registry] = lambda: registry
    client = TestClient(app)
    yield client
    app.dependency_overrides.pop(get_round_store, None)
    app.dependency_overrides.pop(get_live_round_registry, None)
