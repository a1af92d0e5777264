"""Canonical coordinates.

Convention:
    - latitude in degrees, expected in [-90, 90] (passed through unchanged)
    - longitude in degrees, canonical range (-180, 180]

Longitude is always normalized before it is serialized into a request or
compared for equality, so 540 and -180 both become 180.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def normalize_longitude(longitude: float) -> float:
    """Reduce a longitude into (-180, 180].

    180 stays 180, -180 wraps to 180, and values several turns away from
    the canonical range (720, -1080, ...) reduce in constant time.

    Raises:
        ValueError: If ``longitude`` is infinite or NaN.
    """
    longitude = float(longitude)
    if not math.isfinite(longitude):
        raise ValueError(f"Longitude must be finite, got {longitude!r}")
    wrapped = longitude % 360.0
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


@dataclass(frozen=True)
class Coordinate:
    """An immutable latitude/longitude pair with canonical longitude."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", normalize_longitude(self.longitude))

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


def normalize(latitude: float, longitude: float) -> Coordinate:
    """Build a canonical Coordinate from an arbitrary lat/lon pair."""
    return Coordinate(latitude, longitude)


def format_degrees(value: float) -> str:
    """Render degrees for a query string without a trailing ``.0``.

    ``0.0`` renders as ``0`` and ``37.7749`` as ``37.7749``.
    """
    value = float(value)
    if value == 0.0:
        # Drop the sign of -0.0
        return "0"
    text = repr(value)
    if text.endswith(".0"):
        return text[:-2]
    return text
