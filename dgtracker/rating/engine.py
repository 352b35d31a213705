"""Pure score-to-rating computation."""

from __future__ import annotations

import math
from typing import Optional

from .tables import BandRatingTable, DirectRatingTable


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""

    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _finalize(value: float) -> int:
    return max(0, _round_half_away(value))


def _band_rating(table: BandRatingTable, score: int) -> float:
    bands = table.bands

    for band in bands:
        if band.min <= score <= band.max:
            return band.rating_at(score)

    lowest = bands[0]
    if score < lowest.min:
        return lowest.rating_at(score)

    # Past the top of the table, or inside a gap between bands: continue the line
    # of the nearest band below from its max rating.
    below = [band for band in bands if band.max < score]
    anchor = max(below, key=lambda band: band.max)
    at_max = anchor.rating_at(anchor.max)
    return at_max - (score - anchor.max) * anchor.increment


def _direct_rating(table: DirectRatingTable, score: int) -> float:
    ratings = table.ratings
    if score in ratings:
        return ratings[score]

    keys = list(ratings)
    low_key, high_key = keys[0], keys[-1]
    if score < low_key:
        return ratings[low_key] + (low_key - score) * table.increment
    if score > high_key:
        return ratings[high_key] - (score - high_key) * table.increment

    left = max(k for k in keys if k < score)
    right = min(k for k in keys if k > score)
    fraction = (score - left) / (right - left)
    return ratings[left] + fraction * (ratings[right] - ratings[left])


def compute_rating(
    table: BandRatingTable | DirectRatingTable | None, total_score: int
) -> Optional[int]:
    """Map a round's total strokes to a rating.

    Returns ``None`` when no rating model applies. Results are rounded half away
    from zero and never negative.
    """

    if table is None:
        return None

    score = int(total_score)
    if isinstance(table, BandRatingTable):
        return _finalize(_band_rating(table, score))
    return _finalize(_direct_rating(table, score))


__all__ = ["compute_rating"]
