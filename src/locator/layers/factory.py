"""LayerFactory — one lazy OverlayLayer per descriptor, colors cycled.

Colors come from a fixed palette through a wrapping index. The default
ColorCycle is shared by every factory in the process, so the n-th layer ever
built gets ``PALETTE[n % len(PALETTE)]`` whichever factory built it.
"""

from __future__ import annotations

import threading
from typing import Iterable

from locator.layers.layer import OverlayDescriptor, OverlayLayer
from locator.resolvers.http import JsonFetcher

LAYERS_URL = "https://earthquake.usgs.gov/ws/geoserve/layers.json"

PALETTE = (
    "#1f78b4",  # teal
    "#ffff99",  # yellow
    "#33a02c",  # green
    "#e31a1c",  # red
    "#ff7f00",  # orange
    "#6a3d9a",  # purple
    "#b15928",  # brown
)


class ColorCycle:
    """Monotonic, wrapping palette index (test-and-set under a lock)."""

    def __init__(self, colors: Iterable[str] = PALETTE) -> None:
        self.colors = tuple(colors)
        if not self.colors:
            raise ValueError("ColorCycle needs at least one color")
        self._index = 0
        self._lock = threading.Lock()

    @property
    def index(self) -> int:
        return self._index

    def next(self) -> str:
        with self._lock:
            color = self.colors[self._index % len(self.colors)]
            self._index += 1
        return color


_shared_colors = ColorCycle()


class LayerFactory:
    """Build OverlayLayers that fetch geometry from ``url?type=<name>``."""

    def __init__(
        self,
        fetcher: JsonFetcher,
        url: str = LAYERS_URL,
        colors: ColorCycle | None = None,
    ) -> None:
        self._fetcher = fetcher
        self.url = url
        self.colors = colors if colors is not None else _shared_colors

    def build(self, descriptor: OverlayDescriptor) -> OverlayLayer:
        return OverlayLayer(descriptor, self.colors.next(), self.url, self._fetcher)

    def build_all(self, descriptors: Iterable[OverlayDescriptor]) -> dict[str, OverlayLayer]:
        """Map title -> layer in descriptor order (a repeated title keeps the last layer)."""
        layers: dict[str, OverlayLayer] = {}
        for descriptor in descriptors:
            layers[descriptor.title] = self.build(descriptor)
        return layers
