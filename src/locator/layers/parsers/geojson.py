"""Parse decoded GeoJSON (RFC 7946) collections into LayerFeature records.

Overlay responses arrive already decoded by the fetcher, so input here is a
FeatureCollection or a bare Feature mapping. Point, LineString, Polygon and
their Multi* geometries are kept; coordinates stay in [lng, lat] order.
"""

from __future__ import annotations

from typing import Any

from locator.layers.layer import LayerFeature

GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
    }
)


def parse_geojson(data: Any, id_prefix: str = "geojson") -> list[LayerFeature]:
    """Turn a FeatureCollection (or single Feature) into features.

    Args:
        data: Decoded GeoJSON object.
        id_prefix: Features without an ``id`` get ``<id_prefix>-<index>``.

    Returns:
        Features in document order; unsupported or malformed entries are
        skipped, and anything that is not a Feature/FeatureCollection
        mapping yields ``[]``.
    """
    parsed: list[LayerFeature] = []
    for idx, raw in enumerate(_raw_features(data)):
        feature = _to_layer_feature(raw, idx, id_prefix)
        if feature is not None:
            parsed.append(feature)
    return parsed


def _raw_features(data: Any) -> list:
    if not isinstance(data, dict):
        return []
    kind = data.get("type")
    if kind == "Feature":
        return [data]
    if kind == "FeatureCollection" and isinstance(data.get("features"), list):
        return data["features"]
    return []


def _to_layer_feature(raw: Any, idx: int, id_prefix: str) -> LayerFeature | None:
    geometry = raw.get("geometry") if isinstance(raw, dict) else None
    if not isinstance(geometry, dict):
        return None
    if geometry.get("type") not in GEOMETRY_TYPES or geometry.get("coordinates") is None:
        return None

    properties = raw.get("properties")
    return LayerFeature(
        feature_id=str(raw.get("id", f"{id_prefix}-{idx}")),
        geometry_type=geometry["type"],
        coordinates=geometry["coordinates"],
        properties=properties if isinstance(properties, dict) else {},
    )
