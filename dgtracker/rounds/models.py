from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

YOU = "you"

ParticipantKind = Literal["registered-user", "guest"]
RoundType = Literal["CASUAL", "PRACTICE", "TOURNAMENT", "COMPETITIVE"]


class FinishPolicy(str, Enum):
    """When a live round may be finished and saved."""

    PERMISSIVE = "permissive"
    LAST_HOLE = "last_hole"


class Participant(BaseModel):
    id: str = Field(min_length=1)
    name: str
    kind: ParticipantKind = "guest"
    user_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId"),
        serialization_alias="userId",
    )

    model_config = ConfigDict(populate_by_name=True)


class FinishedRound(BaseModel):
    id: str
    player_id: str = Field(
        validation_alias=AliasChoices("player_id", "playerId"),
        serialization_alias="playerId",
    )
    course_id: str = Field(
        validation_alias=AliasChoices("course_id", "courseId"),
        serialization_alias="courseId",
    )
    course_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("course_name", "courseName"),
        serialization_alias="courseName",
    )
    participant_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("participant_ids", "participantIds"),
        serialization_alias="participantIds",
    )
    participants: List[Participant] = Field(default_factory=list)
    # hole number -> par
    pars: Dict[int, int] = Field(default_factory=dict)
    # participant id -> hole number -> strokes
    scores: Dict[str, Dict[int, int]] = Field(default_factory=dict)
    total_strokes: int = Field(
        validation_alias=AliasChoices("total_strokes", "totalStrokes"),
        serialization_alias="totalStrokes",
    )
    rating: Optional[int] = None
    round_type: RoundType = Field(
        default="CASUAL",
        validation_alias=AliasChoices("round_type", "roundType"),
        serialization_alias="roundType",
    )
    started_at: datetime = Field(
        validation_alias=AliasChoices("started_at", "startedAt"),
        serialization_alias="startedAt",
    )
    ended_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        validation_alias=AliasChoices("ended_at", "endedAt"),
        serialization_alias="endedAt",
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def par_total(self) -> int:
        return sum(self.pars.values())

    def strokes_for(self, participant_id: str = YOU) -> Dict[int, int]:
        return self.scores.get(participant_id, {})


__all__ = [
    "YOU",
    "ParticipantKind",
    "RoundType",
    "FinishPolicy",
    "Participant",
    "FinishedRound",
]
