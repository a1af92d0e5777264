"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "GEOSERVE-LOCATOR"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Geocoding (ArcGIS World GeocodeServer "find")
    geocode_url: str = (
        "https://geocode.arcgis.com/arcgis/rest/services/World/GeocodeServer/find"
    )

    # Geoserve web service: places.json, regions.json and layers.json live here
    geoserve_url: str = "https://earthquake.usgs.gov/ws/geoserve/"
    places_type: str = "event"
    region_types: list[str] = ["admin", "tectonic"]

    # Outbound HTTP
    http_timeout: float = 10.0
    user_agent: str = "geoserve-locator/0.1.0"

    # Fetch the overlay catalog at startup
    preload_overlays: bool = True

    @property
    def places_url(self) -> str:
        return self._geoserve("places.json")

    @property
    def regions_url(self) -> str:
        return self._geoserve("regions.json")

    @property
    def layers_url(self) -> str:
        return self._geoserve("layers.json")

    def _geoserve(self, resource: str) -> str:
        base = self.geoserve_url
        if not base.endswith("/"):
            base += "/"
        return base + resource


settings = Settings()
