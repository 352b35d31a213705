from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dgtracker.api.user_header import UserIdHeader, derive_player_id
from dgtracker.rounds import RoundStore, get_round_store
from dgtracker.rounds.stats import (
    FriendComparison,
    HoleStats,
    PlayerInsights,
    compare_with_friends,
    hole_by_hole,
    player_insights,
    summarize_player,
)
from dgtracker.security import require_api_key

router = APIRouter(
    prefix="/api/stats", tags=["stats"], dependencies=[Depends(require_api_key)]
)

HISTORY_LIMIT = 500


class FriendRef(BaseModel):
    player_id: str = Field(
        validation_alias=AliasChoices("player_id", "playerId"),
        serialization_alias="playerId",
    )
    name: str

    model_config = ConfigDict(populate_by_name=True)


class CompareRequest(BaseModel):
    friends: List[FriendRef] = Field(default_factory=list)
    course_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("course_id", "courseId"),
        serialization_alias="courseId",
    )

    model_config = ConfigDict(populate_by_name=True)


def _history(store: RoundStore, player_id: str, course_id: str | None):
    try:
        return store.list_rounds(player_id, course_id=course_id, limit=HISTORY_LIMIT)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/holes", response_model=List[HoleStats])
def get_hole_stats(
    course_id: str | None = Query(default=None, alias="courseId"),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: RoundStore = Depends(get_round_store),
) -> List[HoleStats]:
    player_id = derive_player_id(api_key, user_id)
    return hole_by_hole(_history(store, player_id, course_id))


@router.get("/insights", response_model=PlayerInsights)
def get_insights(
    course_id: str | None = Query(default=None, alias="courseId"),
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: RoundStore = Depends(get_round_store),
) -> PlayerInsights:
    player_id = derive_player_id(api_key, user_id)
    return player_insights(_history(store, player_id, course_id))


@router.post("/compare", response_model=FriendComparison)
def post_compare(
    payload: CompareRequest,
    api_key: str | None = Depends(require_api_key),
    user_id: UserIdHeader = None,
    store: RoundStore = Depends(get_round_store),
) -> FriendComparison:
    player_id = derive_player_id(api_key, user_id)
    me = summarize_player(
        player_id, "You", _history(store, player_id, payload.course_id)
    )
    friends = [
        summarize_player(
            friend.player_id,
            friend.name,
            _history(store, friend.player_id, payload.course_id),
        )
        for friend in payload.friends
        if friend.player_id != player_id
    ]
    return compare_with_friends(me, friends)
