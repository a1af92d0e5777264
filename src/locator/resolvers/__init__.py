"""Resolvers: one external query in, one broadcast cell emission out."""

from locator.resolvers.geocode import (
    ADDRESS_REQUIRED,
    NO_RESULTS,
    GeocodeResolver,
    LocationResult,
)
from locator.resolvers.http import JsonFetcher
from locator.resolvers.places import PlaceFeature, PlacesResolver
from locator.resolvers.regions import RegionFeature, RegionsResolver

__all__ = [
    "ADDRESS_REQUIRED",
    "NO_RESULTS",
    "GeocodeResolver",
    "JsonFetcher",
    "LocationResult",
    "PlaceFeature",
    "PlacesResolver",
    "RegionFeature",
    "RegionsResolver",
]
