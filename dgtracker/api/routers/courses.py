from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict

from dgtracker.courses import (
    Course,
    CourseNotFound,
    GeoPoint,
    HoleNotFound,
    HoleSpec,
    get_course,
    get_holes,
    list_courses,
    search_courses,
    update_hole_positions,
)
from dgtracker.security import require_api_key

router = APIRouter(
    prefix="/api/courses", tags=["courses"], dependencies=[Depends(require_api_key)]
)


class HolePositionsUpdate(BaseModel):
    tee: GeoPoint | None = None
    basket: GeoPoint | None = None

    model_config = ConfigDict(populate_by_name=True)


@router.get("", response_model=List[Course])
def get_courses() -> List[Course]:
    return list_courses()


@router.get("/search", response_model=List[Course])
def get_course_search(q: str = Query(default="", max_length=100)) -> List[Course]:
    return search_courses(q)


@router.get("/{course_id}", response_model=Course)
def get_course_by_id(course_id: str) -> Course:
    course = get_course(course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")
    return course


@router.get("/{course_id}/holes", response_model=List[HoleSpec])
def get_course_holes(course_id: str) -> List[HoleSpec]:
    try:
        return get_holes(course_id)
    except CourseNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")


@router.patch("/{course_id}/holes/{hole_number}/positions", response_model=HoleSpec)
def patch_hole_positions(
    course_id: str, hole_number: int, payload: HolePositionsUpdate
) -> HoleSpec:
    if payload.tee is None and payload.basket is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="no_positions_given"
        )
    try:
        return update_hole_positions(
            course_id, hole_number, tee=payload.tee, basket=payload.basket
        )
    except CourseNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")
    except HoleNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="hole_not_found")
