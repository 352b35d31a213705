"""Score-to-rating tables for courses with a known PDGA rating spread."""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class RatingBand(BaseModel):
    """Closed score range with a linear per-stroke rating decrement."""

    min: int
    max: int
    base: float
    increment: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "RatingBand":
        if self.min > self.max:
            raise ValueError("band min must not exceed max")
        return self

    def rating_at(self, score: int) -> float:
        return self.base - (score - self.min) * self.increment


class BandRatingTable(BaseModel):
    kind: Literal["bands"] = "bands"
    bands: List[RatingBand]

    @field_validator("bands")
    @classmethod
    def _sort_bands(cls, bands: List[RatingBand]) -> List[RatingBand]:
        if not bands:
            raise ValueError("bands must not be empty")
        # stable sort keeps declaration order for equal minimums (first match wins)
        return sorted(bands, key=lambda band: band.min)


class DirectRatingTable(BaseModel):
    kind: Literal["direct"] = "direct"
    ratings: Dict[int, float]
    increment: float = Field(..., ge=0)

    @field_validator("ratings")
    @classmethod
    def _check_ratings(cls, ratings: Dict[int, float]) -> Dict[int, float]:
        if not ratings:
            raise ValueError("ratings must not be empty")
        return dict(sorted(ratings.items()))


RatingTable = Annotated[
    Union[BandRatingTable, DirectRatingTable], Field(discriminator="kind")
]


EKEBERG_RATING_TABLE = BandRatingTable(
    bands=[
        RatingBand(min=36, max=45, base=1110, increment=12),
        RatingBand(min=46, max=55, base=990, increment=12),
        RatingBand(min=56, max=65, base=870, increment=12),
        RatingBand(min=66, max=75, base=750, increment=12),
        RatingBand(min=76, max=85, base=630, increment=12),
        RatingBand(min=86, max=95, base=510, increment=12),
    ]
)

LANGHUS_RATING_TABLE = BandRatingTable(
    bands=[
        RatingBand(min=40, max=49, base=1099, increment=12),
        RatingBand(min=50, max=59, base=979, increment=12),
        RatingBand(min=60, max=69, base=859, increment=12),
        RatingBand(min=70, max=79, base=739, increment=12),
        RatingBand(min=80, max=89, base=619, increment=12),
        RatingBand(min=90, max=98, base=499, increment=12),
    ]
)

# Empirical ratings are not perfectly linear here; ~8 points per stroke on average.
KROKHOL_RATING_TABLE = DirectRatingTable(
    increment=8,
    ratings={
        112: 596, 111: 604, 110: 612, 109: 620, 108: 628,
        107: 636, 106: 644, 105: 653, 104: 661, 103: 669,
        102: 677, 101: 685, 100: 693, 99: 701, 98: 709,
        97: 718, 96: 726, 95: 734, 94: 742, 93: 750,
        92: 758, 91: 766, 90: 774, 89: 783, 88: 791,
        87: 799, 86: 807, 85: 815, 84: 823, 83: 831,
        82: 839, 81: 847, 80: 856, 79: 864, 78: 872,
        77: 880, 76: 888, 75: 896, 74: 904, 73: 912,
        72: 921, 71: 929, 70: 937, 69: 945, 68: 953,
        67: 961, 66: 969, 65: 977, 64: 985, 63: 994,
        62: 1002, 61: 1010, 60: 1018, 59: 1026, 58: 1034,
        57: 1042, 56: 1050, 55: 1059, 54: 1067, 53: 1075,
    },
)  # fmt: skip

RATING_TABLES: Dict[str, BandRatingTable | DirectRatingTable] = {
    "ekeberg": EKEBERG_RATING_TABLE,
    "krokhol": KROKHOL_RATING_TABLE,
    "langhus": LANGHUS_RATING_TABLE,
}


__all__ = [
    "RatingBand",
    "BandRatingTable",
    "DirectRatingTable",
    "RatingTable",
    "EKEBERG_RATING_TABLE",
    "LANGHUS_RATING_TABLE",
    "KROKHOL_RATING_TABLE",
    "RATING_TABLES",
]
