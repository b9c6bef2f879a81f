"""Device position acquisition with typed failures and a timeout."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..config import Settings, settings
from ..models.domain import LatLng
from .geospatial import validate_coordinates


@dataclass(frozen=True, slots=True)
class Position:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None

    @property
    def point(self) -> LatLng:
        return LatLng(latitude=self.latitude, longitude=self.longitude)


class GeolocationError(Exception):
    code = "UNKNOWN"
    user_message = "An error occurred while getting your location."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class GeolocationDenied(GeolocationError):
    code = "PERMISSION_DENIED"
    user_message = "Location access denied. Please enter a ZIP code manually."


class GeolocationUnavailable(GeolocationError):
    code = "POSITION_UNAVAILABLE"
    user_message = "Location unavailable. Please try again or enter a ZIP code."


class GeolocationTimeout(GeolocationError):
    code = "TIMEOUT"
    user_message = "Location request timed out. Please try again or enter a ZIP code."


class GeolocationProvider(Protocol):
    async def get_current_position(self) -> Position: ...


class FixedPositionProvider:
    """Provider for a position reported by the client, e.g. browser coordinates sent with a request."""

    def __init__(self, position: Optional[Position]) -> None:
        self.position = position

    async def get_current_position(self) -> Position:
        if self.position is None:
            raise GeolocationUnavailable()
        return self.position


async def acquire_position(provider: GeolocationProvider, timeout: float | None = None) -> Position:
    """Ask ``provider`` for a position, raising a GeolocationError subclass on failure."""

    timeout = timeout if timeout is not None else settings.geolocation_timeout_seconds
    try:
        position = await asyncio.wait_for(provider.get_current_position(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise GeolocationTimeout() from exc

    if not validate_coordinates(position.point):
        raise GeolocationUnavailable(f"Provider returned invalid coordinates: {position}")
    return position


@dataclass(frozen=True, slots=True)
class SearchCenter:
    point: LatLng
    radius_miles: float
    fallback: bool
    notice: Optional[str] = None


async def resolve_search_center(
    provider: GeolocationProvider,
    *,
    radius_miles: float | None = None,
    config: Settings | None = None,
) -> SearchCenter:
    """Use the device position when available, else the configured default center with a wider radius."""

    config = config or settings
    try:
        position = await acquire_position(provider, config.geolocation_timeout_seconds)
    except GeolocationError as exc:
        logging.warning(f"Could not get user location ({exc.code}); using default center")
        return SearchCenter(
            point=LatLng(config.default_center_latitude, config.default_center_longitude),
            radius_miles=config.nearby_fallback_radius_miles,
            fallback=True,
            notice=exc.user_message,
        )
    return SearchCenter(
        point=position.point,
        radius_miles=radius_miles or config.default_coordinate_radius_miles,
        fallback=False,
    )
