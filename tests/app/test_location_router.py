"""Unit tests for the location router — search, coordinates, state, reset.

All tests run against a LocationSession wired to a fake geospatial
service (httpx.MockTransport); no external API calls.
"""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.routers.location import router
from locator.resolvers.geocode import ADDRESS_REQUIRED, NO_RESULTS


def _make_app(session=None):
    app = FastAPI()
    app.include_router(router)
    app.state.location_session = session
    return app


@pytest.fixture
def client(live_session):
    return TestClient(_make_app(live_session))


@pytest.mark.unit
class TestLocationState:
    """GET /api/location — snapshot of the cells."""

    def test_initial_state_is_empty(self, client):
        resp = client.get("/api/location")
        assert resp.status_code == 200
        assert resp.json() == {
            "coordinates": None,
            "location": None,
            "error": None,
            "places": None,
            "regions": {"admin": None, "tectonic": None},
        }

    def test_no_session_returns_503(self):
        client = TestClient(_make_app(None))
        resp = client.get("/api/location")
        assert resp.status_code == 503


@pytest.mark.unit
class TestSearch:
    """POST /api/location/search — geocode then locate."""

    def test_search_resolves_everything(self, client):
        resp = client.post("/api/location/search", json={"address": "Golden, CO"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["error"] is None
        assert data["location"]["address"] == "Golden, Colorado, United States"
        assert data["coordinates"]["latitude"] == pytest.approx(39.7555)
        assert data["coordinates"]["longitude"] == pytest.approx(-105.2211)
        assert data["places"][0]["name"] == "Golden"
        assert data["regions"]["admin"][0]["name"] == "admin region"
        assert data["regions"]["tectonic"][0]["type"] == "tectonic"

    def test_blank_address_reports_error(self, client, geo_service):
        resp = client.post("/api/location/search", json={"address": ""})
        assert resp.status_code == 200
        assert resp.json()["error"] == ADDRESS_REQUIRED
        assert geo_service.requests == []

    def test_missing_address_defaults_to_blank(self, client):
        resp = client.post("/api/location/search", json={})
        assert resp.json()["error"] == ADDRESS_REQUIRED

    def test_no_results(self, client, geo_service, urls):
        geo_service.route(urls["geocode"], {"locations": []})
        resp = client.post("/api/location/search", json={"address": "nowhere"})
        data = resp.json()
        assert data["error"] == NO_RESULTS
        assert data["location"] is None
        assert data["places"] is None

    def test_address_is_sent_url_encoded(self, client, geo_service, urls):
        client.post("/api/location/search", json={"address": "1711 Illinois St, Golden"})
        request = geo_service.calls(urls["geocode"])[0]
        assert request.url.params["text"] == "1711 Illinois St, Golden"
        assert request.url.params["f"] == "json"


@pytest.mark.unit
class TestCoordinates:
    """POST /api/location/coordinates — locate a coordinate."""

    def test_locate(self, client):
        resp = client.post("/api/location/coordinates", json={"latitude": 39.75, "longitude": -105.22})
        assert resp.status_code == 200
        data = resp.json()
        assert data["coordinates"] == {"latitude": 39.75, "longitude": -105.22}
        assert data["location"] is None
        assert len(data["places"]) == 1

    def test_longitude_is_normalized(self, client):
        resp = client.post("/api/location/coordinates", json={"latitude": 0, "longitude": 540})
        assert resp.json()["coordinates"]["longitude"] == pytest.approx(180.0)

    def test_latitude_out_of_range_is_422(self, client):
        resp = client.post("/api/location/coordinates", json={"latitude": 91, "longitude": 0})
        assert resp.status_code == 422

    def test_missing_longitude_is_422(self, client):
        resp = client.post("/api/location/coordinates", json={"latitude": 10})
        assert resp.status_code == 422

    @pytest.mark.parametrize(
        "body",
        [
            '{"latitude": 0, "longitude": Infinity}',
            '{"latitude": 0, "longitude": -Infinity}',
            '{"latitude": 0, "longitude": NaN}',
            '{"latitude": NaN, "longitude": 0}',
        ],
    )
    def test_non_finite_values_are_422(self, client, geo_service, body):
        resp = client.post(
            "/api/location/coordinates",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422
        assert geo_service.requests == []
        assert client.get("/api/location").json()["coordinates"] is None


@pytest.mark.unit
class TestClear:
    """DELETE /api/location — reset the cells."""

    def test_clear(self, client):
        client.post("/api/location/search", json={"address": "Golden, CO"})
        resp = client.delete("/api/location")
        assert resp.status_code == 200
        data = resp.json()
        assert data["coordinates"] is None
        assert data["location"] is None
        assert data["places"] is None
        assert data["regions"] == {"admin": None, "tectonic": None}
