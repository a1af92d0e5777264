"""API routers for GEOSERVE-LOCATOR."""

from app.routers.location import router as location_router
from app.routers.overlays import router as overlays_router
from app.routers.ws import router as ws_router

__all__ = ["location_router", "overlays_router", "ws_router"]
