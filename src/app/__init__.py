"""GEOSERVE-LOCATOR HTTP service."""
