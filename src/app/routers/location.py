"""Location endpoints — address search, coordinate lookup, current state.

The session's broadcast cells are the source of truth; these endpoints
trigger resolvers and report what the cells hold afterwards.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from locator.session import LocationSession

router = APIRouter(prefix="/api/location", tags=["location"])


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    """Geocode an address. Blank is accepted and reported as an error."""
    address: str = ""


class CoordinateRequest(BaseModel):
    """Locate a coordinate. Longitude may be outside (-180, 180]."""
    latitude: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(..., allow_inf_nan=False)


class LocationState(BaseModel):
    """Snapshot of every location cell."""
    coordinates: dict | None = None
    location: dict | None = None
    error: str | None = None
    places: list[dict] | None = None
    regions: dict[str, list[dict] | None] = {}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_session(request: Request) -> LocationSession:
    session = getattr(request.app.state, "location_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Location session not initialized")
    return session


def _records(value) -> list[dict] | None:
    if value is None:
        return None
    return [item.to_dict() for item in value]


def snapshot(session: LocationSession) -> LocationState:
    coordinate = session.coordinates.value
    location = session.location.value
    return LocationState(
        coordinates=coordinate.to_dict() if coordinate is not None else None,
        location=location.to_dict() if location is not None else None,
        error=session.error.value,
        places=_records(session.places.value),
        regions={t: _records(cell.value) for t, cell in session.regions.items()},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=LocationState)
async def get_location(request: Request):
    """Current state of the location cells."""
    return snapshot(_get_session(request))


@router.post("/search", response_model=LocationState)
async def search(body: SearchRequest, request: Request):
    """Geocode an address, then resolve places and regions for the match.

    "No results" and "address required" are reported in ``error`` with a
    200 response; they are results, not transport errors.
    """
    session = _get_session(request)
    await session.search(body.address)
    return snapshot(session)


@router.post("/coordinates", response_model=LocationState)
async def locate(body: CoordinateRequest, request: Request):
    """Resolve places and regions for a coordinate (longitude normalized)."""
    session = _get_session(request)
    await session.locate(body.latitude, body.longitude)
    return snapshot(session)


@router.delete("", response_model=LocationState)
async def clear_location(request: Request):
    """Reset every location cell to empty."""
    session = _get_session(request)
    session.empty()
    return snapshot(session)
