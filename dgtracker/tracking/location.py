"""Live location tracking for distance-to-basket.

A :class:`LocationSession` owns one subscription to a :class:`LocationProvider`.
Delivery errors never propagate: the session logs them, remembers the last error
and keeps serving the last known position until a new sample arrives.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, List, Literal, Optional, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dgtracker.courses.geo import haversine_m
from dgtracker.courses.schemas import GeoPoint

logger = logging.getLogger(__name__)

LocationErrorKind = Literal["permission-denied", "position-unavailable", "timeout"]

SampleCallback = Callable[["LocationSample"], None]
ErrorCallback = Callable[[LocationErrorKind], None]
Unsubscribe = Callable[[], None]


class LocationSample(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    accuracy_m: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("accuracy_m", "accuracyMeters", "accuracy"),
        serialization_alias="accuracyMeters",
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)


class LocationProvider(Protocol):
    def watch(self, on_sample: SampleCallback, on_error: ErrorCallback) -> Unsubscribe:
        ...


class PushLocationProvider:
    """Provider fed by explicit pushes, e.g. samples posted by a client."""

    def __init__(self) -> None:
        self._watchers: List[tuple[SampleCallback, ErrorCallback]] = []
        self._lock = Lock()

    def watch(self, on_sample: SampleCallback, on_error: ErrorCallback) -> Unsubscribe:
        entry = (on_sample, on_error)
        with self._lock:
            self._watchers.append(entry)

        def _unsubscribe() -> None:
            with self._lock:
                if entry in self._watchers:
                    self._watchers.remove(entry)

        return _unsubscribe

    @property
    def watcher_count(self) -> int:
        with self._lock:
            return len(self._watchers)

    def push(self, sample: LocationSample) -> None:
        with self._lock:
            watchers = list(self._watchers)
        for on_sample, _ in watchers:
            on_sample(sample)

    def fail(self, kind: LocationErrorKind) -> None:
        with self._lock:
            watchers = list(self._watchers)
        for _, on_error in watchers:
            on_error(kind)


class LocationSession:
    def __init__(self, provider: LocationProvider):
        self._provider = provider
        self._unsubscribe: Optional[Unsubscribe] = None
        self.last_sample: Optional[LocationSample] = None
        self.last_error: Optional[LocationErrorKind] = None

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._provider.watch(self._on_sample, self._on_error)

    def stop(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def _on_sample(self, sample: LocationSample) -> None:
        self.last_sample = sample
        self.last_error = None

    def _on_error(self, kind: LocationErrorKind) -> None:
        self.last_error = kind
        if kind == "permission-denied":
            logger.debug("location permission denied; keeping last known position")
        else:
            logger.warning("location update failed: %s", kind)

    def distance_to(self, point: GeoPoint | None) -> Optional[float]:
        if point is None or self.last_sample is None:
            return None
        return haversine_m(self.last_sample.point, point)

    def is_near(self, point: GeoPoint | None, radius_m: float) -> bool:
        distance = self.distance_to(point)
        return distance is not None and distance <= radius_m


__all__ = [
    "LocationErrorKind",
    "LocationSample",
    "LocationProvider",
    "PushLocationProvider",
    "LocationSession",
]
