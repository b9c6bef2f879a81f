"""Deterministic geocoder used when no provider is configured."""

from __future__ import annotations

import hashlib
from typing import Optional

from ...models.domain import ZIP_IN_ADDRESS_PATTERN, LatLng
from ..search.query_parser import validate_zip_code
from .base import Geocoder

KNOWN_ZIP_CODES: dict[str, LatLng] = {
    "10001": LatLng(40.7484, -73.9967),  # New York
    "90210": LatLng(34.0901, -118.4065),  # Beverly Hills
    "60601": LatLng(41.8827, -87.6233),  # Chicago
    "02101": LatLng(42.3601, -71.0589),  # Boston
    "94102": LatLng(37.7749, -122.4194),  # San Francisco
    "97301": LatLng(44.9429, -123.0307),  # Salem
}

KNOWN_PLACES: tuple[tuple[str, LatLng], ...] = (
    ("new york", LatLng(40.7128, -74.0060)),
    ("los angeles", LatLng(34.0522, -118.2437)),
    ("chicago", LatLng(41.8781, -87.6298)),
    ("san francisco", LatLng(37.7749, -122.4194)),
    ("boston", LatLng(42.3601, -71.0589)),
    ("salem", LatLng(44.9429, -123.0307)),
)

# continental US bounding box for hashed fallbacks
_LAT_RANGE = (24.5, 49.0)
_LON_RANGE = (-124.7, -66.9)


def hashed_zip_point(zip_code: str) -> LatLng:
    """Map a ZIP to a stable pseudo-location inside the continental US."""

    digest = hashlib.sha256(zip_code.encode("utf-8")).digest()
    lat_fraction = int.from_bytes(digest[:4], "big") / 0xFFFFFFFF
    lon_fraction = int.from_bytes(digest[4:8], "big") / 0xFFFFFFFF
    latitude = _LAT_RANGE[0] + lat_fraction * (_LAT_RANGE[1] - _LAT_RANGE[0])
    longitude = _LON_RANGE[0] + lon_fraction * (_LON_RANGE[1] - _LON_RANGE[0])
    return LatLng(round(latitude, 4), round(longitude, 4))


class MockGeocoder(Geocoder):
    def __init__(self, use_hash_fallback: bool = True) -> None:
        self.use_hash_fallback = use_hash_fallback

    async def geocode_zip(self, zip_code: str) -> Optional[LatLng]:
        if not validate_zip_code(zip_code):
            return None
        base_zip = zip_code[:5]
        known = KNOWN_ZIP_CODES.get(base_zip)
        if known is not None:
            return known
        return hashed_zip_point(base_zip) if self.use_hash_fallback else None

    async def geocode_address(self, address: str) -> Optional[LatLng]:
        if not address or not address.strip():
            return None
        lowered = address.lower()
        for place, point in KNOWN_PLACES:
            if place in lowered:
                return point
        match = ZIP_IN_ADDRESS_PATTERN.search(address)
        if match:
            return await self.geocode_zip(match.group(0))
        return None
