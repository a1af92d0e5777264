"""Display surface capability and an in-memory implementation.

The rendering host implements DisplaySurface; layers call into it when they
are attached, detached, or receive geometry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from loguru import logger

if TYPE_CHECKING:
    from locator.layers.layer import OverlayLayer


class DisplaySurface(Protocol):
    """Hooks a rendering host exposes to overlay layers."""

    def on_attach(self, layer: OverlayLayer) -> None: ...

    def on_detach(self, layer: OverlayLayer) -> None: ...

    def on_update(self, layer: OverlayLayer) -> None: ...


class MapSurface:
    """Registry of overlay layers currently shown on a map.

    Layers are kept in attach order, which is also their draw order.
    """

    def __init__(self, name: str = "map") -> None:
        self.name = name
        self._layers: dict[str, OverlayLayer] = {}

    def add_layer(self, layer: OverlayLayer) -> None:
        layer.attach(self)

    def remove_layer(self, layer: OverlayLayer) -> None:
        layer.detach(self)

    def has_layer(self, layer: OverlayLayer) -> bool:
        return self._layers.get(layer.title) is layer

    def list_layers(self) -> list[OverlayLayer]:
        return list(self._layers.values())

    def to_geojson(self) -> list[dict]:
        """Every attached layer as a styled FeatureCollection, in draw order."""
        from locator.layers.exporters.geojson import export_geojson

        return [export_geojson(layer) for layer in self._layers.values()]

    def on_attach(self, layer: OverlayLayer) -> None:
        self._layers[layer.title] = layer

    def on_detach(self, layer: OverlayLayer) -> None:
        if self._layers.get(layer.title) is layer:
            del self._layers[layer.title]

    def on_update(self, layer: OverlayLayer) -> None:
        logger.debug(f"{self.name}: overlay {layer.title!r} has {len(layer.geometry())} feature(s)")
