from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    lat: float
    lon: float


class HoleSpec(BaseModel):
    course_id: str = Field(
        validation_alias=AliasChoices("course_id", "courseId"),
        serialization_alias="courseId",
    )
    number: int = Field(
        ge=1,
        validation_alias=AliasChoices("number", "hole", "holeNumber"),
        serialization_alias="holeNumber",
    )
    par: int = Field(ge=1)
    distance_m: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("distance_m", "distanceMeters"),
        serialization_alias="distanceMeters",
    )
    tee: Optional[GeoPoint] = None
    basket: Optional[GeoPoint] = None

    model_config = ConfigDict(populate_by_name=True)


class Course(BaseModel):
    id: str
    name: str
    holes: int = Field(ge=1)
    location: Optional[str] = None
    description: Optional[str] = None
    center: Optional[GeoPoint] = None
    rating_model: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("rating_model", "ratingModel"),
        serialization_alias="ratingModel",
    )

    model_config = ConfigDict(populate_by_name=True)


__all__ = ["GeoPoint", "HoleSpec", "Course"]
