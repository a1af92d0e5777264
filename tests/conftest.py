"""Shared fixtures: a fake geospatial web service behind httpx.MockTransport.

No test talks to the network. Routes map a URL path to one of:
    - a JSON-serializable body (200)
    - an int status code (empty body)
    - an exception instance (raised as a transport failure)
    - a callable(request) -> httpx.Response
"""

from __future__ import annotations

import httpx
import pytest

from locator.resolvers.http import JsonFetcher

BASE = "http://geo.test"
GEOCODE_URL = f"{BASE}/geocode/find"
PLACES_URL = f"{BASE}/ws/geoserve/places.json"
REGIONS_URL = f"{BASE}/ws/geoserve/regions.json"
LAYERS_URL = f"{BASE}/ws/geoserve/layers.json"


class FakeGeoService:
    """Routes GETs to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.requests: list[httpx.Request] = []

    def route(self, url: str, response) -> None:
        self.routes[httpx.URL(url).path] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(response, Exception):
            raise response
        if isinstance(response, int):
            return httpx.Response(response)
        if callable(response):
            return response(request)
        return httpx.Response(200, json=response)

    def fetcher(self) -> JsonFetcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return JsonFetcher(client)

    def calls(self, url: str) -> list[httpx.Request]:
        path = httpx.URL(url).path
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def geo_service() -> FakeGeoService:
    return FakeGeoService()


@pytest.fixture
def fetcher(geo_service) -> JsonFetcher:
    return geo_service.fetcher()


@pytest.fixture
def urls() -> dict[str, str]:
    return {
        "geocode": GEOCODE_URL,
        "places": PLACES_URL,
        "regions": REGIONS_URL,
        "layers": LAYERS_URL,
    }


def connect_error(message: str = "connection refused") -> httpx.ConnectError:
    return httpx.ConnectError(message)


@pytest.fixture
def transport_failure():
    """Factory for a transport-level exception to use as a route."""
    return connect_error


CATALOG_JSON = {
    "parameters": {
        "required": {
            "type": {
                "values": [
                    {"title": "Tectonic Regions", "name": "tectonic"},
                    {"title": "Flinn Engdahl Regions", "name": "fe"},
                    {"title": "Neic Catalog Regions", "name": "neiccatalog"},
                ]
            }
        }
    }
}


def geometry_json(name: str, count: int = 1) -> dict:
    """A geometry response holding ``count`` square polygons under ``name``."""
    return {
        name: {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "id": f"{name}.{i}",
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [[[i, 0], [i + 1, 0], [i + 1, 1], [i, 1], [i, 0]]],
                    },
                    "properties": {"name": f"{name} {i}"},
                }
                for i in range(count)
            ],
        }
    }


def layers_route(catalog=None, geometries: dict | None = None):
    """Route for the shared layers endpoint: catalog without ``type``, geometry with it.

    ``geometries`` maps a type token to a body, status code or exception.
    Unknown types get a 404.
    """
    geometries = geometries or {}

    def handle(request: httpx.Request) -> httpx.Response:
        token = request.url.params.get("type")
        body = catalog if token is None else geometries.get(token, 404)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, int):
            return httpx.Response(body)
        return httpx.Response(200, json=body)

    return handle


@pytest.fixture
def catalog_json() -> dict:
    return CATALOG_JSON


@pytest.fixture
def make_geometry():
    return geometry_json


@pytest.fixture
def make_layers_route():
    return layers_route


GOLDEN_GEOCODE_JSON = {
    "locations": [
        {
            "name": "Golden, Colorado, United States",
            "extent": {"xmin": -105.27, "ymin": 39.70, "xmax": -105.17, "ymax": 39.80},
            "feature": {
                "geometry": {"x": -105.2211, "y": 39.7555},
                "attributes": {"Score": 100},
            },
        }
    ]
}


@pytest.fixture
def golden_geocode_json() -> dict:
    return GOLDEN_GEOCODE_JSON


@pytest.fixture
def session(fetcher, urls):
    """A LocationSession wired to the fake service with its own color cycle."""
    from locator.layers.factory import ColorCycle, LayerFactory
    from locator.session import LocationSession

    return LocationSession(
        fetcher,
        geocode_url=urls["geocode"],
        places_url=urls["places"],
        regions_url=urls["regions"],
        region_types=("admin", "tectonic"),
        layers_url=urls["layers"],
        layer_factory=LayerFactory(fetcher, urls["layers"], colors=ColorCycle()),
    )


@pytest.fixture
def regions_route():
    """Route for regions.json answering each type with one named region."""

    def handle(request: httpx.Request) -> httpx.Response:
        token = request.url.params.get("type", "")
        body = {token: {"features": [{"properties": {"name": f"{token} region"}}]}}
        return httpx.Response(200, json=body)

    return handle


@pytest.fixture
def live_session(session, geo_service, urls, regions_route, golden_geocode_json, catalog_json,
                 make_layers_route, make_geometry):
    """Session whose fake service answers every endpoint."""
    geo_service.route(urls["geocode"], golden_geocode_json)
    geo_service.route(
        urls["places"],
        {"event": {"features": [{"properties": {"name": "Golden", "distance": 0.4}}]}},
    )
    geo_service.route(urls["regions"], regions_route)
    geo_service.route(
        urls["layers"],
        make_layers_route(catalog_json, {"tectonic": make_geometry("tectonic", 2)}),
    )
    return session
