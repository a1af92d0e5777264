"""Geocode resolver — free-text address to a location.

Uses the ArcGIS World GeocodeServer ``find`` operation:
https://developers.arcgis.com/rest/geocode/api-reference/geocoding-find.htm
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx
from loguru import logger

from locator.comms.broadcast import BroadcastCell
from locator.geo.coordinates import Coordinate
from locator.resolvers.http import JsonFetcher

GEOCODE_URL = (
    "https://geocode.arcgis.com/arcgis/rest/services/World/GeocodeServer/find"
)

ADDRESS_REQUIRED = "An address is required."
NO_RESULTS = "No results. Please search again."


@dataclass(frozen=True)
class LocationResult:
    """A resolved location.

    Attributes:
        coordinate: Canonical coordinate of the match.
        address: Display text for the match (the candidate ``name``).
        score: Match score reported by the geocoder (0-100), if any.
        extent: Suggested map extent ``{xmin, ymin, xmax, ymax}``, if any.
        raw: The untouched candidate from the service response.
    """

    coordinate: Coordinate
    address: str = ""
    score: float | None = None
    extent: dict | None = None
    raw: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_candidate(cls, candidate: dict) -> "LocationResult":
        """Parse one ``locations[]`` entry.

        Raises:
            ValueError: If the candidate carries no usable point geometry.
        """
        if not isinstance(candidate, dict):
            raise ValueError("Geocode candidate is not an object")
        feature = candidate.get("feature") or {}
        geometry = feature.get("geometry") or {}
        attributes = feature.get("attributes") or {}
        try:
            coordinate = Coordinate(float(geometry["y"]), float(geometry["x"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Geocode candidate has no point geometry: {e}") from e

        score = attributes.get("Score")
        return cls(
            coordinate=coordinate,
            address=candidate.get("name", ""),
            score=float(score) if score is not None else None,
            extent=candidate.get("extent"),
            raw=candidate,
        )

    def to_dict(self) -> dict:
        return {
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "address": self.address,
            "score": self.score,
            "extent": self.extent,
        }


class GeocodeResolver:
    """Resolve an address and publish the outcome.

    Cells:
        location: first matching ``LocationResult`` or ``None``.
        error: user-facing message or ``None`` when there is no error.
    """

    def __init__(self, fetcher: JsonFetcher, url: str = GEOCODE_URL) -> None:
        self._fetcher = fetcher
        self.url = url
        self.location: BroadcastCell[LocationResult] = BroadcastCell(name="location")
        self.error: BroadcastCell[str] = BroadcastCell(name="error")

    def build_url(self, address: str) -> str:
        return str(httpx.URL(self.url, params={"f": "json", "text": address}))

    def empty(self) -> None:
        self.location.emit(None)
        self.error.emit(None)

    async def resolve(self, address: str | None) -> LocationResult | None:
        """Geocode ``address`` and publish into ``location`` and ``error``.

        A blank address makes no request; the error is published on the next
        loop iteration rather than inside this call stack.
        """
        if not address or not address.strip():
            await asyncio.sleep(0)
            self.error.emit(ADDRESS_REQUIRED)
            self.location.emit(None)
            return None

        response = await self._fetcher.get_json(
            self.build_url(address), "geocode", fallback={"locations": None}
        )
        locations = response.get("locations") if isinstance(response, dict) else None
        if not isinstance(locations, list):
            locations = []

        result = None
        if locations:
            try:
                result = LocationResult.from_candidate(locations[0])
            except ValueError as e:
                logger.warning(f"Ignoring geocode candidate for {address!r}: {e}")

        if result is None:
            self.error.emit(NO_RESULTS)
            self.location.emit(None)
            return None

        self.location.emit(result)
        self.error.emit(None)
        return result
