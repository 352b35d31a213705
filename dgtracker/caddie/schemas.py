"""Pydantic schemas for the on-course caddie."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AdviceTone = Literal["positive", "warning", "neutral", "motivational", "ace"]
DistanceCategory = Literal[
    "long", "fairway", "approach", "circleTwo", "circleOne", "tapIn"
]


class CaddieAdvice(BaseModel):
    """Advice shown next to the scorecard."""

    message: str
    tone: AdviceTone = "neutral"
    distance_category: Optional[DistanceCategory] = Field(
        default=None, serialization_alias="distanceCategory"
    )
    distance_m: Optional[int] = Field(default=None, serialization_alias="distanceMeters")

    model_config = ConfigDict(populate_by_name=True)
