from .location import (
    LocationErrorKind,
    LocationProvider,
    LocationSample,
    LocationSession,
    PushLocationProvider,
)

__all__ = [
    "LocationErrorKind",
    "LocationProvider",
    "LocationSample",
    "LocationSession",
    "PushLocationProvider",
]
