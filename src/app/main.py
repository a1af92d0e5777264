"""GEOSERVE-LOCATOR - location resolution and overlay service.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import settings
from app.routers import location_router, overlays_router, ws_router
from locator.session import LocationSession


# ---------------------------------------------------------------------------
# Subsystem startup helpers
# ---------------------------------------------------------------------------

def _create_session() -> LocationSession:
    """Create the location session with a pooled HTTP client."""
    client = httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.user_agent},
    )
    return LocationSession.from_settings(settings, client)


async def _preload_overlays(session: LocationSession) -> None:
    """Fetch the overlay catalog; failures leave the catalog empty."""
    count = await session.load_overlays()
    if count:
        logger.info(f"Overlay catalog: {count} overlay(s) from {settings.layers_url}")
    else:
        logger.warning(f"Overlay catalog empty or unavailable: {settings.layers_url}")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info("  GEOSERVE-LOCATOR v0.1.0 - INITIALIZING")
    logger.info("=" * 60)

    session = _create_session()
    app.state.location_session = session
    logger.info(f"Geocoder: {settings.geocode_url}")
    logger.info(f"Geoserve: {settings.geoserve_url} (regions: {', '.join(settings.region_types)})")

    if settings.preload_overlays:
        await _preload_overlays(session)

    logger.info("=" * 60)
    logger.info("  GEOSERVE-LOCATOR ONLINE")
    logger.info("=" * 60)

    yield

    logger.info("GEOSERVE-LOCATOR shutting down...")
    await session.close()
    app.state.location_session = None


# Create FastAPI app
app = FastAPI(
    title="GEOSERVE-LOCATOR",
    description="Location resolution and overlay layers for map displays",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(location_router)
app.include_router(overlays_router)
app.include_router(ws_router)


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok", "app": settings.app_name}


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
