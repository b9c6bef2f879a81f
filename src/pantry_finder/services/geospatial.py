"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Any, Optional

from ..models.domain import LatLng

EARTH_RADIUS_MILES = 3959.0
KM_PER_MILE = 1.609344


def is_valid_lat_lng(point: Any) -> bool:
    """Return True if ``point`` is a LatLng whose components are finite numbers."""

    if not isinstance(point, LatLng):
        return False
    for value in (point.latitude, point.longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return True


def validate_coordinates(point: Any) -> bool:
    """Return True if ``point`` is finite and within latitude/longitude ranges (inclusive)."""

    if not is_valid_lat_lng(point):
        return False
    return -90 <= point.latitude <= 90 and -180 <= point.longitude <= 180


def distance_miles(point1: LatLng, point2: LatLng) -> float:
    """Compute great-circle distance in miles using the Haversine formula."""

    if not validate_coordinates(point1) or not validate_coordinates(point2):
        raise ValueError("Invalid coordinates provided")

    if point1.latitude == point2.latitude and point1.longitude == point2.longitude:
        return 0.0

    phi1, phi2 = math.radians(point1.latitude), math.radians(point2.latitude)
    d_phi = math.radians(point2.latitude - point1.latitude)
    d_lambda = math.radians(point2.longitude - point1.longitude)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def miles_to_km(miles: float) -> float:
    return miles * KM_PER_MILE


def km_to_miles(km: float) -> float:
    return km / KM_PER_MILE


def bounding_box(center: LatLng, radius_miles: float) -> tuple[float, float, float, float]:
    """Return (lat_min, lat_max, lon_min, lon_max) enclosing a radius around ``center``.

    Used to narrow store range queries before the exact distance check. The box
    widens to the full longitude span near the poles or across the antimeridian.
    """

    lat_delta = math.degrees(radius_miles / EARTH_RADIUS_MILES)
    lat_min = max(-90.0, center.latitude - lat_delta)
    lat_max = min(90.0, center.latitude + lat_delta)

    cos_lat = math.cos(math.radians(center.latitude))
    if cos_lat < 1e-6 or lat_min <= -90.0 or lat_max >= 90.0:
        return lat_min, lat_max, -180.0, 180.0
    lon_delta = math.degrees(radius_miles / (EARTH_RADIUS_MILES * cos_lat))
    lon_min = center.longitude - lon_delta
    lon_max = center.longitude + lon_delta
    # antimeridian crossing
    if lon_min < -180.0 or lon_max > 180.0:
        return lat_min, lat_max, -180.0, 180.0
    return lat_min, lat_max, lon_min, lon_max


def format_address(
    street: Optional[str],
    city: Optional[str],
    state: Optional[str],
    zip_code: Optional[str],
    street2: Optional[str] = None,
) -> str:
    """Join address parts into "street, [street2, ]city, STATE ZIP"."""

    if not street or not city or not state or not zip_code:
        raise ValueError("Missing required address fields: street, city, state, zip_code")

    parts = [street]
    if street2:
        parts.append(street2)
    parts.append(city)
    parts.append(f"{state} {zip_code}")
    return ", ".join(parts)
