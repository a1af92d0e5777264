"""JSON over HTTP GET with failures folded into a fallback value.

All geospatial services are plain GET endpoints returning JSON. A transport
or server failure is logged and replaced with the caller's fallback so that
no resolver ever lets a failure escape into shared state.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "geoserve-locator/0.1.0"


class JsonFetcher:
    """Issue one GET per call and decode the JSON body.

    Args:
        client: Shared ``httpx.AsyncClient``. When omitted a short-lived
            client is opened for every request.
        timeout: Per-request timeout in seconds (enforced by httpx).
        user_agent: Value of the User-Agent header.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = client
        self.timeout = timeout
        self.user_agent = user_agent

    async def get_json(self, url: str, action: str, fallback: Any = None) -> Any:
        """GET ``url`` and return its JSON body, or ``fallback`` on failure."""
        headers = {"User-Agent": self.user_agent}
        logger.debug(f"{action}: GET {url}")
        try:
            if self._client is not None:
                resp = await self._client.get(url, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.get(url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"{action} failed: {e}")
            return fallback

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
