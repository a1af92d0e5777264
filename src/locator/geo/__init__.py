"""Coordinate value objects and longitude normalization."""

from locator.geo.coordinates import (
    Coordinate,
    format_degrees,
    normalize,
    normalize_longitude,
)

__all__ = ["Coordinate", "format_degrees", "normalize", "normalize_longitude"]
