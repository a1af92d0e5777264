"""Regions resolver — enclosing administrative/tectonic regions for a coordinate."""

from __future__ import annotations

from dataclasses import dataclass, field

from locator.resolvers.features import FeatureResolver
from locator.resolvers.http import JsonFetcher

REGIONS_URL = "https://earthquake.usgs.gov/ws/geoserve/regions.json"


@dataclass(frozen=True)
class RegionFeature:
    """A region that contains the queried coordinate."""

    name: str
    query_type: str
    properties: dict = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return dict(self.properties, name=self.name, type=self.query_type)


class RegionsResolver(FeatureResolver[RegionFeature]):
    action = "regions"

    def __init__(
        self, fetcher: JsonFetcher, url: str = REGIONS_URL, query_type: str = "tectonic"
    ) -> None:
        super().__init__(fetcher, url, query_type)

    @property
    def regions(self):
        return self.features

    def make_feature(self, properties: dict) -> RegionFeature:
        name = properties.get("name") or properties.get("title") or ""
        return RegionFeature(name=str(name), query_type=self.query_type, properties=properties)
