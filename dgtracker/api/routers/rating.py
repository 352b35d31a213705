from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dgtracker.courses import get_course
from dgtracker.metrics import RATINGS_COMPUTED
from dgtracker.rating import rate_round, resolve_rating_key
from dgtracker.security import require_api_key

router = APIRouter(
    prefix="/api/rating", tags=["rating"], dependencies=[Depends(require_api_key)]
)


class RatingRequest(BaseModel):
    course_id: str = Field(
        validation_alias=AliasChoices("course_id", "courseId"),
        serialization_alias="courseId",
    )
    total_score: int = Field(
        validation_alias=AliasChoices("total_score", "totalScore"),
        serialization_alias="totalScore",
    )

    model_config = ConfigDict(populate_by_name=True)


class RatingResponse(BaseModel):
    rating: int | None = None
    applicable: bool
    model: str | None = None

    model_config = ConfigDict(protected_namespaces=())


@router.post("", response_model=RatingResponse)
def post_rating(payload: RatingRequest) -> RatingResponse:
    course = get_course(payload.course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")

    key = resolve_rating_key(course)
    if key is None:
        return RatingResponse(rating=None, applicable=False, model=None)

    RATINGS_COMPUTED.labels(model=key).inc()
    return RatingResponse(
        rating=rate_round(course, payload.total_score), applicable=True, model=key
    )
