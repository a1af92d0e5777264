"""Overlay endpoints — catalog listing and lazily loaded layer geometry."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from locator.layers.exporters.geojson import export_geojson
from locator.session import LocationSession

router = APIRouter(prefix="/api/overlays", tags=["overlays"])


class OverlaySummary(BaseModel):
    """One entry of the overlay catalog."""
    title: str
    type: str
    color: str
    loaded: bool
    attached: bool


def _get_session(request: Request) -> LocationSession:
    session = getattr(request.app.state, "location_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Location session not initialized")
    return session


@router.get("", response_model=list[OverlaySummary])
async def list_overlays(request: Request, refresh: bool = False):
    """List overlays in catalog order; fetch the catalog if it is not loaded."""
    session = _get_session(request)
    if refresh or session.overlays.value is None:
        await session.load_overlays()
    layers = session.overlays.value or {}
    return [
        OverlaySummary(
            title=layer.title,
            type=layer.type,
            color=layer.color,
            loaded=layer.is_loaded(),
            attached=session.surface.has_layer(layer),
        )
        for layer in layers.values()
    ]


@router.get("/{title}")
async def get_overlay(title: str, request: Request):
    """Attach an overlay to the service map and return its GeoJSON.

    The first request for a layer triggers its geometry fetch; later
    requests reuse the loaded geometry.
    """
    session = _get_session(request)
    layer = session.catalog.get(title)
    if layer is None:
        raise HTTPException(status_code=404, detail=f"Overlay not found: {title}")
    session.surface.add_layer(layer)
    await layer.settled()
    if not layer.is_loaded():
        # Detach so the next request re-attaches and retries the fetch
        session.surface.remove_layer(layer)
        raise HTTPException(status_code=502, detail="Overlay geometry unavailable")
    return export_geojson(layer)


@router.delete("/{title}")
async def detach_overlay(title: str, request: Request):
    """Remove an overlay from the service map (geometry stays cached)."""
    session = _get_session(request)
    layer = session.catalog.get(title)
    if layer is None:
        raise HTTPException(status_code=404, detail=f"Overlay not found: {title}")
    session.surface.remove_layer(layer)
    return {"title": layer.title, "attached": False, "loaded": layer.is_loaded()}
