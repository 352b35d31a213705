from .events import (
    record_halfway_review,
    record_location_error,
    record_round_abandoned,
    record_round_finished,
    record_round_started,
    set_round_telemetry_emitter,
)

__all__ = [
    "record_halfway_review",
    "record_location_error",
    "record_round_abandoned",
    "record_round_finished",
    "record_round_started",
    "set_round_telemetry_emitter",
]
