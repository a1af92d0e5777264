"""LocationSession — composition root for one map display.

Owns a single JsonFetcher and every resolver, and exposes their cells:

    coordinates  current canonical Coordinate (or None)
    location     geocode result          (GeocodeResolver.location)
    error        user-facing message     (GeocodeResolver.error)
    places       nearby places           (PlacesResolver.features)
    regions      {type: cell}            (one RegionsResolver per type)
    overlays     {title: OverlayLayer}   (OverlayCatalog.overlays)

Overlapping calls are not serialized: each issues its own request and
results land in the cells in arrival order, so a slow stale response can
overwrite a newer one. There is no request cancellation.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

import httpx
from loguru import logger

from locator.comms.broadcast import BroadcastCell
from locator.geo.coordinates import Coordinate, normalize
from locator.layers.catalog import OverlayCatalog
from locator.layers.factory import LAYERS_URL, LayerFactory
from locator.layers.surface import MapSurface
from locator.resolvers.geocode import GEOCODE_URL, GeocodeResolver, LocationResult
from locator.resolvers.http import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, JsonFetcher
from locator.resolvers.places import PLACES_URL, PlacesResolver
from locator.resolvers.regions import REGIONS_URL, RegionsResolver


class LocationSession:
    """Wire resolvers, cells and the overlay catalog together."""

    def __init__(
        self,
        fetcher: JsonFetcher,
        *,
        geocode_url: str = GEOCODE_URL,
        places_url: str = PLACES_URL,
        places_type: str = "event",
        regions_url: str = REGIONS_URL,
        region_types: Iterable[str] = ("admin", "tectonic"),
        layers_url: str = LAYERS_URL,
        layer_factory: LayerFactory | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.coordinates: BroadcastCell[Coordinate] = BroadcastCell(name="coordinates")

        self.geocoder = GeocodeResolver(fetcher, geocode_url)
        self.places_resolver = PlacesResolver(fetcher, places_url, places_type)
        self.regions_resolvers: dict[str, RegionsResolver] = {
            t: RegionsResolver(fetcher, regions_url, t) for t in region_types
        }
        self.catalog = OverlayCatalog(
            fetcher,
            layer_factory if layer_factory is not None else LayerFactory(fetcher, layers_url),
            layers_url,
        )
        self.surface = MapSurface("session")

    @classmethod
    def from_settings(cls, settings, client: httpx.AsyncClient | None = None) -> "LocationSession":
        """Build a session from ``app.config.Settings``-like values."""
        fetcher = JsonFetcher(
            client,
            timeout=getattr(settings, "http_timeout", DEFAULT_TIMEOUT),
            user_agent=getattr(settings, "user_agent", DEFAULT_USER_AGENT),
        )
        return cls(
            fetcher,
            geocode_url=settings.geocode_url,
            places_url=settings.places_url,
            places_type=settings.places_type,
            regions_url=settings.regions_url,
            region_types=settings.region_types,
            layers_url=settings.layers_url,
        )

    # -- cells ------------------------------------------------------------

    @property
    def location(self) -> BroadcastCell[LocationResult]:
        return self.geocoder.location

    @property
    def error(self) -> BroadcastCell[str]:
        return self.geocoder.error

    @property
    def places(self) -> BroadcastCell:
        return self.places_resolver.features

    @property
    def regions(self) -> dict[str, BroadcastCell]:
        return {t: r.features for t, r in self.regions_resolvers.items()}

    @property
    def overlays(self) -> BroadcastCell:
        return self.catalog.overlays

    def cells(self) -> dict[str, BroadcastCell]:
        """Every cell by a stable, flat name (regions as ``regions:<type>``)."""
        out = {
            "coordinates": self.coordinates,
            "location": self.location,
            "error": self.error,
            "places": self.places,
        }
        for query_type, cell in self.regions.items():
            out[f"regions:{query_type}"] = cell
        out["overlays"] = self.overlays
        return out

    # -- operations -------------------------------------------------------

    async def search(self, address: str | None) -> LocationResult | None:
        """Geocode ``address``; on a match, locate its coordinate."""
        result = await self.geocoder.resolve(address)
        if result is not None:
            await self.locate(result.coordinate.latitude, result.coordinate.longitude)
        return result

    async def locate(self, latitude: float, longitude: float) -> Coordinate:
        """Publish a canonical coordinate, then resolve places and regions."""
        coordinate = normalize(latitude, longitude)
        self.coordinates.emit(coordinate)
        logger.info(f"Locating {coordinate.latitude:.5f}, {coordinate.longitude:.5f}")
        await asyncio.gather(
            self.places_resolver.resolve(coordinate),
            *(r.resolve(coordinate) for r in self.regions_resolvers.values()),
        )
        return coordinate

    async def load_overlays(self) -> int:
        """Fetch the catalog; a new batch replaces the layers on the surface.

        Layers from the previous batch are detached from ``surface`` so it only
        ever draws instances the overlays cell still holds. A failed fetch
        keeps the current catalog and surface.
        """
        previous = self.overlays.value
        descriptors = await self.catalog.fetch()
        current = self.overlays.value
        if current is not previous:
            live = list((current or {}).values())
            for layer in self.surface.list_layers():
                if not any(layer is c for c in live):
                    layer.detach(self.surface)
        return len(descriptors)

    def empty(self) -> None:
        """Clear every displayed cell (overlays are kept; see empty_overlays)."""
        self.coordinates.emit(None)
        self.geocoder.empty()
        self.places_resolver.empty()
        for resolver in self.regions_resolvers.values():
            resolver.empty()

    def empty_overlays(self) -> None:
        for layer in self.surface.list_layers():
            layer.detach(self.surface)
        self.catalog.empty()

    async def close(self) -> None:
        await self.fetcher.aclose()
