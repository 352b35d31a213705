"""Resolve which rating table applies to a course."""

from __future__ import annotations

import logging
from typing import Optional

from dgtracker.courses.schemas import Course

from .engine import compute_rating
from .tables import RATING_TABLES, BandRatingTable, DirectRatingTable

logger = logging.getLogger(__name__)


def resolve_rating_key(course: Course | None) -> Optional[str]:
    """Return the rating table key for *course*, or ``None`` when unrated.

    An explicit ``rating_model`` on the course wins; otherwise the course name is
    matched case-insensitively against the known course fragments.
    """

    if course is None:
        return None

    if course.rating_model:
        key = course.rating_model.strip().lower()
        if key in RATING_TABLES:
            return key
        logger.warning(
            "course %s references unknown rating model %r", course.id, course.rating_model
        )

    name = (course.name or "").lower()
    for fragment in RATING_TABLES:
        if fragment in name:
            return fragment
    return None


def resolve_rating_table(
    course: Course | None,
) -> BandRatingTable | DirectRatingTable | None:
    key = resolve_rating_key(course)
    return RATING_TABLES[key] if key else None


def rate_round(course: Course | None, total_score: int) -> Optional[int]:
    """Rating for *total_score* on *course*; ``None`` if the course is unrated."""

    return compute_rating(resolve_rating_table(course), total_score)


__all__ = ["resolve_rating_key", "resolve_rating_table", "rate_round"]
