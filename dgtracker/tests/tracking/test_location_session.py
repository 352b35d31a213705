from __future__ import annotations

import logging

import pytest

from dgtracker.courses import GeoPoint
from dgtracker.tracking import LocationSample, LocationSession, PushLocationProvider

BASKET = GeoPoint(lat=59.8942663, lon=10.7877485)


def test_session_tracks_last_sample() -> None:
    provider = PushLocationProvider()
    session = LocationSession(provider)
    session.start()
    assert session.active is True
    assert provider.watcher_count == 1

    provider.push(LocationSample(lat=59.8949319, lon=10.7871644, accuracy=5))
    assert session.last_sample is not None
    assert session.last_sample.accuracy_m == 5
    assert session.distance_to(BASKET) == pytest.approx(81, abs=2)


def test_start_twice_subscribes_once() -> None:
    provider = PushLocationProvider()
    session = LocationSession(provider)
    session.start()
    session.start()
    assert provider.watcher_count == 1


def test_stop_is_idempotent_and_releases_subscription() -> None:
    provider = PushLocationProvider()
    session = LocationSession(provider)
    session.start()
    session.stop()
    session.stop()
    assert session.active is False
    assert provider.watcher_count == 0

    provider.push(LocationSample(lat=1.0, lon=1.0))
    assert session.last_sample is None


def test_errors_are_soft_and_keep_last_position(caplog) -> None:
    provider = PushLocationProvider()
    session = LocationSession(provider)
    session.start()
    provider.push(LocationSample(lat=BASKET.lat, lon=BASKET.lon))

    with caplog.at_level(logging.DEBUG, logger="dgtracker.tracking.location"):
        provider.fail("position-unavailable")
        provider.fail("permission-denied")

    assert session.last_error == "permission-denied"
    assert session.distance_to(BASKET) == pytest.approx(0.0, abs=0.01)
    levels = {record.getMessage(): record.levelno for record in caplog.records}
    assert levels["location update failed: position-unavailable"] == logging.WARNING
    assert any(level == logging.DEBUG for level in levels.values())

    provider.push(LocationSample(lat=BASKET.lat, lon=BASKET.lon))
    assert session.last_error is None


def test_distance_unknown_without_sample_or_target() -> None:
    session = LocationSession(PushLocationProvider())
    assert session.distance_to(BASKET) is None
    assert session.is_near(BASKET, 500) is False

    session.start()
    session._on_sample(LocationSample(lat=0, lon=0))
    assert session.distance_to(None) is None


def test_is_near_uses_radius() -> None:
    provider = PushLocationProvider()
    session = LocationSession(provider)
    session.start()
    # roughly 1.1 km north of the basket
    provider.push(LocationSample(lat=BASKET.lat + 0.01, lon=BASKET.lon))
    assert session.is_near(BASKET, 500) is False
    assert session.is_near(BASKET, 2000) is True


def test_sample_validates_coordinates() -> None:
    with pytest.raises(ValueError):
        LocationSample(lat=91, lon=0)
