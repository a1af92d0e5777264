"""Overlay layer system — catalog, lazy layers, display surfaces.

Overlay geometry is GeoJSON fetched on first attach and parsed into
LayerFeature records; exporters turn it back into FeatureCollections.
"""

from locator.layers.catalog import OverlayCatalog
from locator.layers.factory import PALETTE, ColorCycle, LayerFactory
from locator.layers.layer import LayerFeature, OverlayDescriptor, OverlayLayer
from locator.layers.surface import DisplaySurface, MapSurface

__all__ = [
    "PALETTE",
    "ColorCycle",
    "DisplaySurface",
    "LayerFactory",
    "LayerFeature",
    "MapSurface",
    "OverlayCatalog",
    "OverlayDescriptor",
    "OverlayLayer",
]
