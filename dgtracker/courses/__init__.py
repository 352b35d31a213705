"""Course and hole data."""

from .geo import haversine_m
from .schemas import Course, GeoPoint, HoleSpec
from .store import (
    CourseNotFound,
    HoleNotFound,
    get_course,
    get_holes,
    list_courses,
    search_courses,
    update_hole_positions,
)

__all__ = [
    "Course",
    "GeoPoint",
    "HoleSpec",
    "haversine_m",
    "CourseNotFound",
    "HoleNotFound",
    "get_course",
    "get_holes",
    "list_courses",
    "search_courses",
    "update_hole_positions",
]
