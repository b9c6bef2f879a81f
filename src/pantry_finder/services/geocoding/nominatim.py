"""HTTP geocoder for Nominatim-compatible search endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from ...config import Settings, settings
from ...models.domain import LatLng
from ..geospatial import validate_coordinates
from ..search.query_parser import validate_zip_code
from .base import Geocoder

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class NominatimGeocoder(Geocoder):
    def __init__(
        self,
        base_url: str | None = None,
        *,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = config or settings
        self.base_url = (base_url or config.geocoder_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Geocoder base URL is not configured.")
        self.user_agent = config.geocoder_user_agent
        self.country_codes = config.geocoder_country_codes
        self.timeout = config.geocoder_timeout_seconds
        self.max_retries = config.geocoder_max_retries
        self.backoff_seconds = config.geocoder_backoff_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            transport=self._transport,
        )

    async def _search(self, params: dict[str, Any]) -> Optional[list]:
        """Run a search request with retries. Returns the decoded payload or None on failure."""

        url = f"{self.base_url}/search"
        query = {"format": "jsonv2", "limit": 1, "countrycodes": self.country_codes, **params}
        async with self._client() as client:
            attempt = 0
            while True:
                try:
                    response = await client.get(url, params=query)
                    response.raise_for_status()
                    payload = response.json()
                    return payload if isinstance(payload, list) else None
                except httpx.HTTPStatusError as e:
                    if e.response.status_code not in RETRYABLE_STATUS_CODES:
                        logger.warning(f"Geocoder rejected request ({e.response.status_code}): {params}")
                        return None
                    error: Exception = e
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    error = e
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning(f"Geocoder request failed: {e}")
                    return None

                attempt += 1
                if attempt > self.max_retries:
                    logger.warning(f"Geocoder unavailable after {self.max_retries} retries: {error}")
                    return None
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"Geocoder error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {error}")
                await asyncio.sleep(wait_time)

    @staticmethod
    def _first_point(payload: Optional[list]) -> Optional[LatLng]:
        if not payload:
            return None
        first = payload[0]
        try:
            point = LatLng(latitude=float(first["lat"]), longitude=float(first["lon"]))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Geocoder returned an unusable result: {first}")
            return None
        return point if validate_coordinates(point) else None

    async def geocode_zip(self, zip_code: str) -> Optional[LatLng]:
        if not validate_zip_code(zip_code):
            return None
        return self._first_point(await self._search({"postalcode": zip_code[:5]}))

    async def geocode_address(self, address: str) -> Optional[LatLng]:
        if not address or not address.strip():
            return None
        return self._first_point(await self._search({"q": address.strip()}))
