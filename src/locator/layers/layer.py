"""Overlay descriptors and lazily loaded overlay layers.

An OverlayLayer is cheap to create. Its geometry is fetched the first time
it is attached to a display surface, and never again once that fetch has
succeeded. A failed fetch clears the ``loaded`` flag so the next attach
retries; overlay geometry is optional enrichment.

All coordinates are stored in GeoJSON convention: [lng, lat].
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from loguru import logger

from locator.resolvers.http import JsonFetcher

if TYPE_CHECKING:
    from locator.layers.surface import DisplaySurface


@dataclass
class LayerFeature:
    """A single feature (point, line, polygon) within a layer.

    Attributes:
        feature_id: Unique identifier for this feature.
        geometry_type: GeoJSON geometry type ("Point", "Polygon", ...).
        coordinates: GeoJSON-style coordinate arrays.
        properties: Arbitrary key-value metadata.
    """

    feature_id: str
    geometry_type: str
    coordinates: list
    properties: dict


@dataclass(frozen=True)
class OverlayDescriptor:
    """One fetchable overlay type from the catalog.

    Attributes:
        title: Human-readable display name; unique key for the layer.
        name: Type token sent to the geometry endpoint (``?type=<name>``).
    """

    title: str
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> "OverlayDescriptor":
        """Build from a catalog ``values[]`` entry.

        Raises:
            ValueError: If ``name`` is missing.
        """
        if not isinstance(data, dict) or not data.get("name"):
            raise ValueError(f"Overlay descriptor has no name: {data!r}")
        name = str(data["name"])
        return cls(title=str(data.get("title") or name), name=name)


def default_style(color: str) -> dict:
    """Render style for region overlays."""
    return {
        "clickable": False,
        "color": color,
        "fillOpacity": 0.4,
        "opacity": 1,
        "weight": 2,
    }


class OverlayLayer:
    """A map overlay that fetches its own geometry on first attach.

    Attributes:
        descriptor: The catalog entry this layer was built from.
        color: Palette color assigned at build time.
        url: Base geometry endpoint; the type token is added as ``?type=``.
    """

    def __init__(
        self,
        descriptor: OverlayDescriptor,
        color: str,
        url: str,
        fetcher: JsonFetcher,
    ) -> None:
        self.descriptor = descriptor
        self.color = color
        self.url = url
        self.style = default_style(color)
        self._fetcher = fetcher
        self._features: list[LayerFeature] = []
        self._surfaces: list[DisplaySurface] = []
        self._loaded = False
        self._task: asyncio.Task | None = None
        self.fetch_count = 0

    def __repr__(self) -> str:
        return (
            f"OverlayLayer(title={self.title!r}, type={self.type!r}, "
            f"color={self.color!r}, loaded={self._loaded})"
        )

    @property
    def title(self) -> str:
        return self.descriptor.title

    @property
    def type(self) -> str:
        return self.descriptor.name

    @property
    def surfaces(self) -> tuple:
        return tuple(self._surfaces)

    def is_loaded(self) -> bool:
        return self._loaded

    def geometry(self) -> list[LayerFeature]:
        """Features merged so far (empty until the first fetch succeeds)."""
        return list(self._features)

    def build_url(self) -> str:
        return str(httpx.URL(self.url, params={"type": self.type}))

    def attach(self, surface: DisplaySurface) -> None:
        """Add this layer to ``surface``; the first attach starts the fetch.

        Must be called with a running event loop; the fetch runs as a task
        and ``settled()`` awaits it.
        """
        if surface in self._surfaces:
            return
        if not self._loaded:
            self._task = asyncio.get_running_loop().create_task(self._load())
            self._loaded = True

        self._surfaces.append(surface)
        surface.on_attach(self)

    def detach(self, surface: DisplaySurface) -> None:
        if surface not in self._surfaces:
            return
        self._surfaces.remove(surface)
        surface.on_detach(self)

    async def settled(self) -> None:
        """Wait for the in-flight geometry fetch, if any."""
        if self._task is not None and not self._task.done():
            await self._task

    async def _load(self) -> None:
        from locator.layers.parsers.geojson import parse_geojson

        self.fetch_count += 1
        response = await self._fetcher.get_json(self.build_url(), f"overlay {self.type}")
        collection = response.get(self.type) if isinstance(response, dict) else None
        if not isinstance(collection, dict):
            if response is not None:
                logger.warning(f"Overlay {self.type}: response has no '{self.type}' collection")
            # let the next attach try again
            self._loaded = False
            return

        features = parse_geojson(collection, id_prefix=self.type)
        self._features.extend(features)
        logger.info(f"Overlay {self.title!r} loaded: {len(features)} feature(s)")

        for surface in list(self._surfaces):
            try:
                surface.on_update(self)
            except Exception:
                logger.exception(f"Surface update failed for overlay {self.title!r}")
