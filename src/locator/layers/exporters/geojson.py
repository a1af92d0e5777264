"""Export an overlay layer's geometry as a GeoJSON FeatureCollection dict.

The collection carries the layer's ``title`` and render ``style`` as foreign
members so a renderer can draw it without knowing about OverlayLayer.
"""

from __future__ import annotations

from locator.layers.layer import LayerFeature, OverlayLayer


def export_geojson(layer: OverlayLayer) -> dict:
    """Export a layer's currently loaded geometry.

    An unloaded layer exports an empty FeatureCollection.
    """
    return {
        "type": "FeatureCollection",
        "title": layer.title,
        "style": dict(layer.style),
        "features": [_feature_to_geojson(f) for f in layer.geometry()],
    }


def _feature_to_geojson(feature: LayerFeature) -> dict:
    """Convert a LayerFeature to a GeoJSON Feature dict."""
    return {
        "type": "Feature",
        "id": feature.feature_id,
        "geometry": {
            "type": feature.geometry_type,
            "coordinates": feature.coordinates,
        },
        "properties": dict(feature.properties),
    }
