import asyncio

import pytest

from pantry_finder.config import Settings
from pantry_finder.models.domain import LatLng
from pantry_finder.services.geolocation import (
    FixedPositionProvider,
    GeolocationDenied,
    GeolocationTimeout,
    GeolocationUnavailable,
    Position,
    acquire_position,
    resolve_search_center,
)


class SlowProvider:
    async def get_current_position(self):
        await asyncio.sleep(5)
        return Position(44.9, -123.0)


class DeniedProvider:
    async def get_current_position(self):
        raise GeolocationDenied()


@pytest.fixture()
def config():
    return Settings(geolocation_timeout_seconds=0.05)


def test_acquire_position_returns_provider_position():
    position = asyncio.run(acquire_position(FixedPositionProvider(Position(40.7, -74.0, accuracy=12.0)), 1))

    assert position.point == LatLng(40.7, -74.0)
    assert position.accuracy == 12.0


def test_acquire_position_times_out():
    with pytest.raises(GeolocationTimeout) as excinfo:
        asyncio.run(acquire_position(SlowProvider(), timeout=0.01))

    assert excinfo.value.code == "TIMEOUT"
    assert "timed out" in excinfo.value.user_message


def test_acquire_position_propagates_denial():
    with pytest.raises(GeolocationDenied) as excinfo:
        asyncio.run(acquire_position(DeniedProvider(), timeout=1))

    assert excinfo.value.user_message == "Location access denied. Please enter a ZIP code manually."


def test_acquire_position_rejects_invalid_coordinates():
    with pytest.raises(GeolocationUnavailable):
        asyncio.run(acquire_position(FixedPositionProvider(Position(float("nan"), 10.0)), timeout=1))


def test_missing_position_is_unavailable():
    with pytest.raises(GeolocationUnavailable):
        asyncio.run(acquire_position(FixedPositionProvider(None), timeout=1))


def test_resolve_search_center_uses_device_position(config):
    center = asyncio.run(
        resolve_search_center(FixedPositionProvider(Position(40.7, -74.0)), config=config)
    )

    assert center.point == LatLng(40.7, -74.0)
    assert center.radius_miles == 25
    assert center.fallback is False
    assert center.notice is None


def test_resolve_search_center_keeps_requested_radius(config):
    center = asyncio.run(
        resolve_search_center(FixedPositionProvider(Position(40.7, -74.0)), radius_miles=5, config=config)
    )

    assert center.radius_miles == 5


@pytest.mark.parametrize(
    "provider, message",
    [
        (DeniedProvider(), "Location access denied. Please enter a ZIP code manually."),
        (SlowProvider(), "Location request timed out. Please try again or enter a ZIP code."),
        (FixedPositionProvider(None), "Location unavailable. Please try again or enter a ZIP code."),
    ],
)
def test_resolve_search_center_falls_back_to_default_center(config, provider, message):
    center = asyncio.run(resolve_search_center(provider, radius_miles=5, config=config))

    assert center.fallback is True
    assert center.point == LatLng(44.9429, -123.0307)
    assert center.radius_miles == 50
    assert center.notice == message
