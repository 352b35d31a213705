from __future__ import annotations

import logging
from typing import Callable, Dict, List, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dgtracker.api.user_header import UserIdHeader, derive_player_id
from dgtracker.caddie import CaddieAdvice, advise
from dgtracker.courses import CourseNotFound, HoleSpec
from dgtracker.rounds import (
    YOU,
    FinishedRound,
    FinishNotAllowed,
    HoleIndexError,
    InvalidRoundError,
    LiveRound,
    LiveRoundRegistry,
    Participant,
    RoundNotFound,
    RoundOwnershipError,
    RoundStore,
    UnknownParticipantError,
    get_live_round_registry,
    get_round_store,
)
from dgtracker.rounds.models import RoundType
from dgtracker.security import require_api_key
from dgtracker.tracking import LocationErrorKind, LocationSample

router = APIRouter(
    prefix="/api/rounds", tags=["rounds"], dependencies=[Depends(require_api_key)]
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StartLiveRoundRequest(BaseModel):
    course_id: str = Field(
        validation_alias=AliasChoices("course_id", "courseId"),
        serialization_alias="courseId",
    )
    participants: List[Participant] = Field(default_factory=list)
    round_type: RoundType = Field(
        default="CASUAL",
        validation_alias=AliasChoices("round_type", "roundType"),
        serialization_alias="roundType",
    )

    model_config = ConfigDict(populate_by_name=True)


class ScoreTarget(BaseModel):
    participant_id: str = Field(
        default=YOU,
        validation_alias=AliasChoices("participant_id", "participantId"),
        serialization_alias="participantId",
    )
    hole_index: int = Field(
        validation_alias=AliasChoices("hole_index", "holeIndex"),
        serialization_alias="holeIndex",
    )

    model_config = ConfigDict(populate_by_name=True)


class SetScoreRequest(ScoreTarget):
    strokes: int


class NavigateRequest(BaseModel):
    hole_index: int = Field(
        validation_alias=AliasChoices("hole_index", "holeIndex"),
        serialization_alias="holeIndex",
    )

    model_config = ConfigDict(populate_by_name=True)


class LocationErrorRequest(BaseModel):
    kind: LocationErrorKind


class LiveRoundOut(BaseModel):
    round_id: str = Field(serialization_alias="roundId")
    course_id: str = Field(serialization_alias="courseId")
    course_name: str = Field(serialization_alias="courseName")
    round_type: RoundType = Field(serialization_alias="roundType")
    participants: List[Participant]
    participant_ids: List[str] = Field(serialization_alias="participantIds")
    hole_count: int = Field(serialization_alias="holeCount")
    current_hole_index: int = Field(serialization_alias="currentHoleIndex")
    current_hole: HoleSpec = Field(serialization_alias="currentHole")
    # participant id -> strokes per hole, in hole order
    scores: Dict[str, List[int]]
    totals: Dict[str, int]
    to_par: Dict[str, int] = Field(serialization_alias="toPar")
    par_total: int = Field(serialization_alias="parTotal")
    is_complete: bool = Field(serialization_alias="isComplete")
    can_finish: bool = Field(serialization_alias="canFinish")
    halfway_review_shown: bool = Field(serialization_alias="halfwayReviewShown")

    model_config = ConfigDict(populate_by_name=True)


class HalfwayReviewOut(BaseModel):
    show: bool
    summary: Dict[str, Dict[str, int]] | None = None


class LocationStatusOut(BaseModel):
    distance_m: float | None = Field(default=None, serialization_alias="distanceMeters")
    near_basket: bool = Field(serialization_alias="nearBasket")
    last_error: LocationErrorKind | None = Field(
        default=None, serialization_alias="lastError"
    )

    model_config = ConfigDict(populate_by_name=True)


def _snapshot(live: LiveRound, registry: LiveRoundRegistry) -> LiveRoundOut:
    engine = live.engine
    ids = engine.participant_ids
    return LiveRoundOut(
        round_id=live.round_id,
        course_id=live.course.id,
        course_name=live.course.name,
        round_type=live.round_type,
        participants=live.participants,
        participant_ids=ids,
        hole_count=engine.hole_count,
        current_hole_index=engine.current_hole_index,
        current_hole=engine.current_hole,
        scores={
            pid: [engine.get_score(pid, i) for i in range(engine.hole_count)]
            for pid in ids
        },
        totals={pid: engine.get_total(pid) for pid in ids},
        to_par={pid: engine.get_to_par(pid) for pid in ids},
        par_total=engine.get_par_total(),
        is_complete=engine.is_round_complete(),
        can_finish=engine.can_finish(registry.finish_policy),
        halfway_review_shown=engine.state.halfway_review_shown,
    )


def _location_status(live: LiveRound, registry: LiveRoundRegistry) -> LocationStatusOut:
    return LocationStatusOut(
        distance_m=live.distance_to_basket(),
        near_basket=live.near_basket(registry.near_basket_m),
        last_error=live.location.last_error,
    )


def _on_live_round(
    registry: LiveRoundRegistry,
    round_id: str,
    player_id: str,
    action: Callable[[LiveRound], T],
) -> T:
    try:
        return registry.apply(round_id, player_id, action)
    except RoundNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="round not found"
        )
    except RoundOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="round not owned by player"
        )
    except UnknownParticipantError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="participant not found"
        )
    except (HoleIndexError, InvalidRoundError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.post("/live", response_model=LiveRoundOut, status_code=status.HTTP_201_CREATED)
def start_live_round(
    payload: StartLiveRoundRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)
    try:
        live = registry.start_round(
            player_id, payload.course_id, payload.participants, payload.round_type
        )
    except CourseNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")
    except InvalidRoundError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _snapshot(live, registry)


@router.get("/live/{round_id}", response_model=LiveRoundOut)
def get_live_round(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)
    return _on_live_round(
        registry, round_id, player_id, lambda live: _snapshot(live, registry)
    )


@router.put("/live/{round_id}/scores", response_model=LiveRoundOut)
def put_score(
    round_id: str,
    payload: SetScoreRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)

    def _set(live: LiveRound) -> LiveRoundOut:
        live.engine.set_score(payload.participant_id, payload.hole_index, payload.strokes)
        return _snapshot(live, registry)

    return _on_live_round(registry, round_id, player_id, _set)


@router.post("/live/{round_id}/scores/increment", response_model=LiveRoundOut)
def increment_score(
    round_id: str,
    payload: ScoreTarget,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)

    def _increment(live: LiveRound) -> LiveRoundOut:
        live.engine.increment_score(payload.participant_id, payload.hole_index)
        return _snapshot(live, registry)

    return _on_live_round(registry, round_id, player_id, _increment)


@router.post("/live/{round_id}/scores/decrement", response_model=LiveRoundOut)
def decrement_score(
    round_id: str,
    payload: ScoreTarget,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)

    def _decrement(live: LiveRound) -> LiveRoundOut:
        live.engine.decrement_score(payload.participant_id, payload.hole_index)
        return _snapshot(live, registry)

    return _on_live_round(registry, round_id, player_id, _decrement)


@router.post("/live/{round_id}/navigate", response_model=LiveRoundOut)
def navigate(
    round_id: str,
    payload: NavigateRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)

    def _navigate(live: LiveRound) -> LiveRoundOut:
        live.navigate_to(payload.hole_index)
        return _snapshot(live, registry)

    return _on_live_round(registry, round_id, player_id, _navigate)


@router.post("/live/{round_id}/next", response_model=LiveRoundOut)
def next_hole(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)

    def _next(live: LiveRound) -> LiveRoundOut:
        live.next_hole()
        return _snapshot(live, registry)

    return _on_live_round(registry, round_id, player_id, _next)


@router.post("/live/{round_id}/previous", response_model=LiveRoundOut)
def previous_hole(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LiveRoundOut:
    player_id = derive_player_id(api_key, user_id)

    def _previous(live: LiveRound) -> LiveRoundOut:
        live.previous_hole()
        return _snapshot(live, registry)

    return _on_live_round(registry, round_id, player_id, _previous)


@router.post("/live/{round_id}/halfway", response_model=HalfwayReviewOut)
def consume_halfway_review(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> HalfwayReviewOut:
    """Consume the halfway review signal; it is reported once per round."""

    player_id = derive_player_id(api_key, user_id)

    def _halfway(live: LiveRound) -> HalfwayReviewOut:
        if not live.engine.should_show_halfway_review():
            return HalfwayReviewOut(show=False)
        return HalfwayReviewOut(show=True, summary=live.engine.halfway_summary())

    return _on_live_round(registry, round_id, player_id, _halfway)


@router.post("/live/{round_id}/location", response_model=LocationStatusOut)
def post_location(
    round_id: str,
    payload: LocationSample,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LocationStatusOut:
    player_id = derive_player_id(api_key, user_id)

    def _push(live: LiveRound) -> LocationStatusOut:
        live.push_location(payload)
        return _location_status(live, registry)

    return _on_live_round(registry, round_id, player_id, _push)


@router.post("/live/{round_id}/location/error", response_model=LocationStatusOut)
def post_location_error(
    round_id: str,
    payload: LocationErrorRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> LocationStatusOut:
    player_id = derive_player_id(api_key, user_id)

    def _fail(live: LiveRound) -> LocationStatusOut:
        live.report_location_error(payload.kind)
        return _location_status(live, registry)

    return _on_live_round(registry, round_id, player_id, _fail)


@router.get("/live/{round_id}/advice", response_model=CaddieAdvice)
def get_advice(
    round_id: str,
    participant_id: str = Query(default=YOU, alias="participantId"),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> CaddieAdvice:
    player_id = derive_player_id(api_key, user_id)

    def _advise(live: LiveRound) -> CaddieAdvice:
        return advise(
            live.engine,
            participant_id,
            distance_m=live.distance_to_basket(),
            near_basket=live.near_basket(registry.near_basket_m),
        )

    return _on_live_round(registry, round_id, player_id, _advise)


@router.post("/live/{round_id}/finish", response_model=FinishedRound)
def finish_live_round(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> FinishedRound:
    player_id = derive_player_id(api_key, user_id)
    try:
        return registry.finish_round(round_id, player_id)
    except RoundNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="round not found"
        )
    except RoundOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="round not owned by player"
        )
    except FinishNotAllowed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="round not on last hole"
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.delete("/live/{round_id}", status_code=status.HTTP_204_NO_CONTENT)
def abandon_live_round(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    registry: LiveRoundRegistry = Depends(get_live_round_registry),
) -> Response:
    player_id = derive_player_id(api_key, user_id)
    try:
        registry.abandon_round(round_id, player_id)
    except RoundNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="round not found"
        )
    except RoundOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="round not owned by player"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=List[FinishedRound])
def list_finished_rounds(
    course_id: str | None = Query(default=None, alias="courseId"),
    limit: int = Query(default=50, ge=1, le=200),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: RoundStore = Depends(get_round_store),
) -> List[FinishedRound]:
    player_id = derive_player_id(api_key, user_id)
    try:
        return store.list_rounds(player_id, course_id=course_id, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/{round_id}", response_model=FinishedRound)
def get_finished_round(
    round_id: str,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: RoundStore = Depends(get_round_store),
) -> FinishedRound:
    player_id = derive_player_id(api_key, user_id)
    try:
        return store.get(round_id, player_id=player_id)
    except RoundNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="round not found"
        )
    except RoundOwnershipError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="round not owned by player"
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
