"""OverlayCatalog — fetch the list of overlay types and publish their layers.

The catalog endpoint returns a parameter-schema document; overlay types sit
at ``parameters.required.type.values[]``, each with ``title`` and ``name``.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from locator.comms.broadcast import BroadcastCell
from locator.layers.factory import LAYERS_URL, LayerFactory
from locator.layers.layer import OverlayDescriptor, OverlayLayer
from locator.resolvers.http import JsonFetcher


def extract_descriptors(response: Any) -> list[OverlayDescriptor]:
    """Pull overlay descriptors out of a catalog response; [] when absent."""
    try:
        values = response["parameters"]["required"]["type"]["values"]
    except (KeyError, TypeError):
        return []
    if not isinstance(values, list):
        return []

    descriptors: list[OverlayDescriptor] = []
    for value in values:
        try:
            descriptors.append(OverlayDescriptor.from_dict(value))
        except ValueError as e:
            logger.warning(f"Skipping overlay descriptor: {e}")
    return descriptors


class OverlayCatalog:
    """Fetch overlay descriptors once and publish title -> layer.

    Cell:
        overlays: mapping of title to OverlayLayer (insertion order is
            descriptor order), or ``None``.
    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        factory: LayerFactory | None = None,
        url: str = LAYERS_URL,
    ) -> None:
        self._fetcher = fetcher
        self.url = url
        self.factory = factory if factory is not None else LayerFactory(fetcher, url)
        self.overlays: BroadcastCell[dict[str, OverlayLayer]] = BroadcastCell(name="overlays")

    async def fetch(self) -> list[OverlayDescriptor]:
        """Fetch the catalog; emit one batch of layers if it is non-empty."""
        response = await self._fetcher.get_json(self.url, "overlay catalog")
        descriptors = extract_descriptors(response)
        if not descriptors:
            return []

        layers = self.factory.build_all(descriptors)
        logger.info(f"Overlay catalog: {len(layers)} overlay(s) available")
        self.overlays.emit(layers)
        return descriptors

    def get(self, title: str) -> OverlayLayer | None:
        layers = self.overlays.value or {}
        return layers.get(title)

    def empty(self) -> None:
        self.overlays.emit(None)
