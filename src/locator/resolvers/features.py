"""Shared coordinate-to-features resolution for geoserve endpoints.

Geoserve answers ``?latitude=..&longitude=..&type=<type>`` with
``{<type>: {"features": [{"properties": {...}}, ...]}}``. Subclasses turn
each properties mapping into their own feature record.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import httpx
from loguru import logger

from locator.comms.broadcast import BroadcastCell
from locator.geo.coordinates import Coordinate, format_degrees, normalize
from locator.resolvers.http import JsonFetcher

F = TypeVar("F")


def extract_properties(response: Any, query_type: str) -> list[dict]:
    """Pull ``<type>.features[].properties`` out of a response.

    Returns an empty list when the path is absent or malformed. Features
    without a properties object are skipped; order is preserved.
    """
    try:
        features = response[query_type]["features"]
    except (KeyError, TypeError, IndexError):
        return []
    if not isinstance(features, list):
        return []

    out: list[dict] = []
    for feature in features:
        properties = feature.get("properties") if isinstance(feature, dict) else None
        if isinstance(properties, dict):
            out.append(properties)
    return out


class FeatureResolver(Generic[F]):
    """Resolve a coordinate to an ordered list of features.

    Cell:
        features: list of records (possibly empty) after a resolve, ``None``
            when empty()'d or never resolved.
    """

    action = "features"

    def __init__(self, fetcher: JsonFetcher, url: str, query_type: str) -> None:
        self._fetcher = fetcher
        self.url = url
        self.query_type = query_type
        self.features: BroadcastCell[list[F]] = BroadcastCell(
            name=f"{self.action}:{query_type}"
        )

    def build_url(self, latitude: float, longitude: float) -> str:
        coordinate = normalize(latitude, longitude)
        return str(
            httpx.URL(
                self.url,
                params={
                    "latitude": format_degrees(coordinate.latitude),
                    "longitude": format_degrees(coordinate.longitude),
                    "type": self.query_type,
                },
            )
        )

    def empty(self) -> None:
        self.features.emit(None)

    async def resolve(self, coordinate: Coordinate) -> list[F]:
        url = self.build_url(coordinate.latitude, coordinate.longitude)
        response = await self._fetcher.get_json(url, f"{self.action} ({self.query_type})")
        records = [self.make_feature(p) for p in extract_properties(response, self.query_type)]
        logger.debug(f"{self.action} ({self.query_type}): {len(records)} result(s)")
        self.features.emit(records)
        return records

    def make_feature(self, properties: dict) -> F:
        raise NotImplementedError
