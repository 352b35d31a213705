from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from .schemas import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(p1: GeoPoint, p2: GeoPoint) -> float:
    """Compute haversine distance between two geographic points in meters."""

    lat1 = radians(p1.lat)
    lon1 = radians(p1.lon)
    lat2 = radians(p2.lat)
    lon2 = radians(p2.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


def midpoint(points: list[GeoPoint]) -> GeoPoint | None:
    """Plain average of the given points; good enough at course scale."""

    if not points:
        return None
    return GeoPoint(
        lat=sum(p.lat for p in points) / len(points),
        lon=sum(p.lon for p in points) / len(points),
    )


__all__ = ["EARTH_RADIUS_M", "haversine_m", "midpoint"]
