"""In-memory registry of rounds being played.

Each live round couples a :class:`RoundScoringEngine` with the course it is played
on and a location session. Finishing a round rates it, persists it through the
:class:`RoundStore` and drops it from the registry.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from threading import RLock
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from dgtracker.config import get_settings
from dgtracker.courses import CourseNotFound, get_course, get_holes
from dgtracker.courses.schemas import Course, HoleSpec
from dgtracker.metrics import RATINGS_COMPUTED, ROUNDS_FINISHED, ROUNDS_STARTED
from dgtracker.rating import rate_round, resolve_rating_key
from dgtracker.telemetry import (
    record_halfway_review,
    record_location_error,
    record_round_abandoned,
    record_round_finished,
    record_round_started,
)
from dgtracker.tracking import (
    LocationErrorKind,
    LocationSample,
    LocationSession,
    PushLocationProvider,
)

from .engine import RoundScoringEngine, RoundState
from .models import YOU, FinishedRound, FinishPolicy, Participant, RoundType
from .service import (
    RoundNotFound,
    RoundOwnershipError,
    RoundStore,
    _sanitize_id,
    get_round_store,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FinishNotAllowed(Exception):
    pass


@dataclass
class LiveRound:
    round_id: str
    player_id: str
    course: Course
    engine: RoundScoringEngine
    round_type: RoundType = "CASUAL"
    participants: List[Participant] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    provider: PushLocationProvider = field(default_factory=PushLocationProvider)
    location: Optional[LocationSession] = None

    def __post_init__(self) -> None:
        if self.location is None:
            self.location = LocationSession(self.provider)

    @property
    def current_hole(self) -> HoleSpec:
        return self.engine.current_hole

    # Navigation with halfway instrumentation
    def _after_move(self, state: RoundState) -> RoundState:
        if state.halfway_review_pending:
            record_halfway_review(self.round_id)
        return state

    def navigate_to(self, hole_index: int) -> RoundState:
        return self._after_move(self.engine.navigate_to(hole_index))

    def next_hole(self) -> RoundState:
        return self._after_move(self.engine.next_hole())

    def previous_hole(self) -> RoundState:
        return self._after_move(self.engine.previous_hole())

    # Location
    def push_location(self, sample: LocationSample) -> None:
        self.provider.push(sample)

    def report_location_error(self, kind: LocationErrorKind) -> None:
        self.provider.fail(kind)
        record_location_error(self.round_id, kind)

    def distance_to_basket(self) -> Optional[float]:
        return self.location.distance_to(self.current_hole.basket)

    def near_basket(self, radius_m: float) -> bool:
        return self.location.is_near(self.current_hole.basket, radius_m)

    def participant_name(self, participant_id: str) -> str:
        if participant_id == YOU:
            return "You"
        for participant in self.participants:
            if participant.id == participant_id:
                return participant.name
        return participant_id


class LiveRoundRegistry:
    def __init__(
        self,
        store: RoundStore | None = None,
        *,
        finish_policy: FinishPolicy | str | None = None,
        near_basket_m: float | None = None,
        max_age: timedelta | None = None,
    ):
        settings = get_settings()
        self.store = store if store is not None else get_round_store()
        self.finish_policy = FinishPolicy(finish_policy or settings.finish_policy)
        self.near_basket_m = (
            near_basket_m if near_basket_m is not None else settings.near_basket_m
        )
        self.max_age = (
            max_age if max_age is not None else timedelta(hours=settings.live_round_ttl_h)
        )
        self._rounds: Dict[str, LiveRound] = {}
        self._lock = RLock()

    def start_round(
        self,
        player_id: str,
        course_id: str,
        participants: Iterable[Participant] = (),
        round_type: RoundType = "CASUAL",
    ) -> LiveRound:
        _sanitize_id(player_id)
        self.expire_stale()
        course = get_course(course_id)
        if course is None:
            raise CourseNotFound(course_id)
        others = [p for p in participants if p.id != YOU]
        engine = RoundScoringEngine.initialize(get_holes(course_id), others)

        live = LiveRound(
            round_id=str(uuid.uuid4()),
            player_id=player_id,
            course=course,
            engine=engine,
            round_type=round_type,
            participants=others,
        )
        live.location.start()
        with self._lock:
            self._rounds[live.round_id] = live

        record_round_started(
            live.round_id,
            course.id,
            participants=len(engine.participant_ids),
            round_type=round_type,
        )
        ROUNDS_STARTED.labels(round_type=round_type).inc()
        logger.info("round %s started on %s by %s", live.round_id, course.id, player_id)
        return live

    def get(self, round_id: str, player_id: str) -> LiveRound:
        with self._lock:
            live = self._rounds.get(round_id)
        if live is None:
            raise RoundNotFound(round_id)
        if live.player_id != player_id:
            raise RoundOwnershipError(round_id)
        return live

    def apply(
        self, round_id: str, player_id: str, action: Callable[[LiveRound], T]
    ) -> T:
        """Run *action* against a live round while holding the registry lock."""

        with self._lock:
            return action(self.get(round_id, player_id))

    def active_rounds(self, player_id: str) -> List[LiveRound]:
        with self._lock:
            return [r for r in self._rounds.values() if r.player_id == player_id]

    def finish_round(self, round_id: str, player_id: str) -> FinishedRound:
        with self._lock:
            live = self.get(round_id, player_id)
            engine = live.engine
            if not engine.can_finish(self.finish_policy):
                raise FinishNotAllowed(round_id)

            holes = engine.holes
            total = engine.get_total(YOU)
            rating = rate_round(live.course, total)
            if rating is not None:
                RATINGS_COMPUTED.labels(model=resolve_rating_key(live.course)).inc()

            finished = FinishedRound(
                id=live.round_id,
                player_id=live.player_id,
                course_id=live.course.id,
                course_name=live.course.name,
                participant_ids=engine.participant_ids,
                participants=live.participants,
                pars={hole.number: hole.par for hole in holes},
                scores={
                    pid: {
                        hole.number: engine.get_score(pid, index)
                        for index, hole in enumerate(holes)
                    }
                    for pid in engine.participant_ids
                },
                total_strokes=total,
                rating=rating,
                round_type=live.round_type,
                started_at=live.started_at,
            )
            self.store.save(finished)
            live.location.stop()
            del self._rounds[round_id]

        record_round_finished(
            round_id,
            finished.course_id,
            total_strokes=total,
            rating=rating,
            holes_played=len(holes),
        )
        ROUNDS_FINISHED.inc()
        logger.info("round %s finished: %s strokes, rating %s", round_id, total, rating)
        return finished

    def abandon_round(self, round_id: str, player_id: str) -> None:
        with self._lock:
            live = self.get(round_id, player_id)
            live.location.stop()
            del self._rounds[round_id]
        record_round_abandoned(round_id, hole_index=live.engine.current_hole_index)

    def expire_stale(self, now: datetime | None = None) -> List[str]:
        """Drop live rounds started more than ``max_age`` ago and return their ids."""

        now = now or datetime.now(timezone.utc)
        with self._lock:
            stale = [
                live
                for live in self._rounds.values()
                if now - live.started_at > self.max_age
            ]
            for live in stale:
                live.location.stop()
                del self._rounds[live.round_id]
        for live in stale:
            logger.info("round %s expired after %s", live.round_id, self.max_age)
            record_round_abandoned(
                live.round_id, hole_index=live.engine.current_hole_index
            )
        return [live.round_id for live in stale]


@lru_cache(maxsize=1)
def get_live_round_registry() -> LiveRoundRegistry:
    return LiveRoundRegistry()


__all__ = [
    "FinishNotAllowed",
    "LiveRound",
    "LiveRoundRegistry",
    "get_live_round_registry",
]
