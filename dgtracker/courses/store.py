from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional

from .geo import midpoint
from .schemas import Course, GeoPoint, HoleSpec


class CourseNotFound(Exception):
    pass


class HoleNotFound(Exception):
    pass


_COURSES: Dict[str, Course] = {}
_HOLES: Dict[str, List[HoleSpec]] = {}
_LOCK = Lock()

# (par, distance_m) per hole, hole numbers implied by position.
_EKEBERG_LAYOUT = [
    (3, 59), (3, 66), (4, 111), (3, 80), (3, 74), (3, 70),
    (3, 44), (3, 67), (3, 53), (3, 40), (3, 68), (3, 57),
    (3, 62), (3, 62), (3, 113), (3, 54), (3, 45), (3, 90),
]  # fmt: skip

# (tee lat, tee lon, basket lat, basket lon) from OpenStreetMap hole lines.
_EKEBERG_POSITIONS = [
    (59.8949319, 10.7871644, 59.8942663, 10.7877485),
    (59.8940167, 10.7879838, 59.8945078, 10.7882011),
    (59.8935519, 10.7888656, 59.8926336, 10.788934),
    (59.8918455, 10.789687, 59.8915186, 10.79032),
    (59.8913356, 10.7906104, 59.8908404, 10.7910073),
    (59.8907458, 10.7919406, 59.890146, 10.792633),
    (59.8898562, 10.792783, 59.8896019, 10.7930418),
    (59.8894145, 10.7931498, 59.8891965, 10.7920554),
    (59.8894966, 10.7917175, 59.8891992, 10.7909852),
    (59.8895376, 10.7909074, 59.8897744, 10.7915083),
    (59.8902588, 10.7917658, 59.8900705, 10.7905051),
    (59.8906931, 10.790766, 59.890902, 10.7893793),
    (59.8915838, 10.7887127, 59.8915193, 10.7896247),
    (59.8922347, 10.7886879, 59.892745, 10.7896059),
    (59.8936713, 10.788598, 59.8934883, 10.7867259),
    (59.8927554, 10.7871255, 59.8931052, 10.7878625),
    (59.8935913, 10.7863913, 59.8927241, 10.7869177),
    (59.8937958, 10.7866836, 59.8941059, 10.7876385),
]

_KROKHOL_LAYOUT = [
    (3, 111), (4, 144), (3, 69), (3, 117), (3, 112), (3, 77),
    (4, 142), (5, 219), (3, 75), (3, 105), (3, 87), (4, 189),
    (3, 86), (3, 70), (3, 66), (5, 231), (3, 76), (4, 150),
]  # fmt: skip

_LANGHUS_LAYOUT = [
    (3, 57), (3, 51), (4, 117), (4, 91), (3, 46), (4, 110),
    (3, 66), (3, 59), (3, 55), (3, 86), (3, 75), (3, 60),
    (3, 71), (3, 55), (3, 48), (3, 73), (3, 106), (3, 66),
]  # fmt: skip


def _build_holes(
    course_id: str,
    layout: list[tuple[int, int]],
    positions: list[tuple[float, float, float, float]] | None = None,
) -> List[HoleSpec]:
    holes: List[HoleSpec] = []
    for index, (par, distance) in enumerate(layout):
        tee = basket = None
        if positions:
            tee_lat, tee_lon, basket_lat, basket_lon = positions[index]
            tee = GeoPoint(lat=tee_lat, lon=tee_lon)
            basket = GeoPoint(lat=basket_lat, lon=basket_lon)
        holes.append(
            HoleSpec(
                course_id=course_id,
                number=index + 1,
                par=par,
                distance_m=float(distance),
                tee=tee,
                basket=basket,
            )
        )
    return holes


def _seed_courses() -> tuple[Dict[str, Course], Dict[str, List[HoleSpec]]]:
    courses: Dict[str, Course] = {}
    holes: Dict[str, List[HoleSpec]] = {}

    ekeberg_holes = _build_holes("ekeberg", _EKEBERG_LAYOUT, _EKEBERG_POSITIONS)
    courses["ekeberg"] = Course(
        id="ekeberg",
        name="Ekeberg Discgolfpark",
        holes=len(ekeberg_holes),
        location="Oslo, Norway",
        center=midpoint([h.tee for h in ekeberg_holes if h.tee]),
        rating_model="ekeberg",
    )
    holes["ekeberg"] = ekeberg_holes

    krokhol_holes = _build_holes("krokhol-blue", _KROKHOL_LAYOUT)
    courses["krokhol-blue"] = Course(
        id="krokhol-blue",
        name="Krokhol Disc Golf Course - Blue Layout",
        holes=len(krokhol_holes),
        location="Siggerud, Norway",
        rating_model="krokhol",
    )
    holes["krokhol-blue"] = krokhol_holes

    langhus_holes = _build_holes("langhus", _LANGHUS_LAYOUT)
    courses["langhus"] = Course(
        id="langhus",
        name="Langhus Disc Golf Course",
        holes=len(langhus_holes),
        location="Langhus, Norway",
        description="Short - highly technical 18-hole course",
    )
    holes["langhus"] = langhus_holes

    return courses, holes


_COURSES, _HOLES = _seed_courses()


def list_courses() -> List[Course]:
    with _LOCK:
        return sorted(_COURSES.values(), key=lambda course: course.name.lower())


def get_course(course_id: str) -> Optional[Course]:
    with _LOCK:
        return _COURSES.get(course_id)


def search_courses(query: str) -> List[Course]:
    needle = (query or "").strip().lower()
    if not needle:
        return list_courses()
    return [
        course
        for course in list_courses()
        if needle in course.name.lower() or needle in (course.location or "").lower()
    ]


def get_holes(course_id: str) -> List[HoleSpec]:
    with _LOCK:
        if course_id not in _COURSES:
            raise CourseNotFound(course_id)
        return sorted(_HOLES.get(course_id, []), key=lambda hole: hole.number)


def update_hole_positions(
    course_id: str,
    hole_number: int,
    *,
    tee: GeoPoint | None = None,
    basket: GeoPoint | None = None,
) -> HoleSpec:
    """Patch tee and/or basket coordinates; omitted positions are kept."""

    with _LOCK:
        if course_id not in _COURSES:
            raise CourseNotFound(course_id)
        holes = _HOLES.get(course_id, [])
        for index, hole in enumerate(holes):
            if hole.number != hole_number:
                continue
            updated = hole.model_copy(
                update={
                    "tee": tee if tee is not None else hole.tee,
                    "basket": basket if basket is not None else hole.basket,
                }
            )
            holes[index] = updated
            return updated
    raise HoleNotFound(f"{course_id}#{hole_number}")


__all__ = [
    "CourseNotFound",
    "HoleNotFound",
    "list_courses",
    "get_course",
    "search_courses",
    "get_holes",
    "update_hole_positions",
]
