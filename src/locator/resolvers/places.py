"""Places resolver — nearby named places for a coordinate."""

from __future__ import annotations

from dataclasses import dataclass, field

from locator.resolvers.features import FeatureResolver
from locator.resolvers.http import JsonFetcher

PLACES_URL = "https://earthquake.usgs.gov/ws/geoserve/places.json"


@dataclass(frozen=True)
class PlaceFeature:
    """A named place near the queried coordinate.

    ``properties`` is the service's properties object as received
    (name, distance, azimuth, population, admin1_name, country_name, ...).
    """

    name: str
    properties: dict = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return dict(self.properties, name=self.name)


class PlacesResolver(FeatureResolver[PlaceFeature]):
    action = "places"

    def __init__(
        self, fetcher: JsonFetcher, url: str = PLACES_URL, query_type: str = "event"
    ) -> None:
        super().__init__(fetcher, url, query_type)

    @property
    def places(self):
        return self.features

    def make_feature(self, properties: dict) -> PlaceFeature:
        return PlaceFeature(name=str(properties.get("name", "")), properties=properties)
