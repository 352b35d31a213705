"""Telemetry helpers for round lifecycle instrumentation."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Mapping, MutableMapping, Optional

RoundTelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_emitter: Optional[RoundTelemetryEmitter] = None
_logger = logging.getLogger("dgtracker.telemetry.events")


def set_round_telemetry_emitter(candidate: RoundTelemetryEmitter | None) -> None:
    """Register a telemetry emitter used for round instrumentation."""

    global _emitter
    _emitter = candidate if callable(candidate) else None


def _now_ms() -> int:
    return int(time.time() * 1000)


def _safe_emit(event: str, payload: MutableMapping[str, object]) -> None:
    if not _emitter:
        _logger.debug("telemetry emitter not configured for event %s", event)
        return
    try:
        _emitter(event, dict(payload))
    except Exception:  # pragma: no cover - logging only
        _logger.exception("failed to emit telemetry event %s", event)


def record_round_started(
    round_id: str, course_id: str, *, participants: int, round_type: str
) -> None:
    payload: Dict[str, object] = {
        "roundId": round_id,
        "courseId": course_id,
        "participants": int(participants),
        "roundType": round_type,
        "ts": _now_ms(),
    }
    _safe_emit("round.start", payload)


def record_round_finished(
    round_id: str,
    course_id: str,
    *,
    total_strokes: int,
    rating: int | None = None,
    holes_played: int | None = None,
) -> None:
    payload: Dict[str, object] = {
        "roundId": round_id,
        "courseId": course_id,
        "totalStrokes": int(total_strokes),
        "ts": _now_ms(),
    }
    if rating is not None:
        payload["rating"] = int(rating)
    if holes_played is not None:
        payload["holesPlayed"] = int(holes_played)
    _safe_emit("round.finish", payload)


def record_round_abandoned(round_id: str, *, hole_index: int) -> None:
    payload: Dict[str, object] = {
        "roundId": round_id,
        "holeIndex": int(hole_index),
        "ts": _now_ms(),
    }
    _safe_emit("round.abandon", payload)


def record_halfway_review(round_id: str) -> None:
    _safe_emit("round.halfway_review", {"roundId": round_id, "ts": _now_ms()})


def record_location_error(round_id: str, kind: str) -> None:
    _safe_emit(
        "location.error", {"roundId": round_id, "kind": kind, "ts": _now_ms()}
    )


__all__ = [
    "RoundTelemetryEmitter",
    "set_round_telemetry_emitter",
    "record_round_started",
    "record_round_finished",
    "record_round_abandoned",
    "record_halfway_review",
    "record_location_error",
]
