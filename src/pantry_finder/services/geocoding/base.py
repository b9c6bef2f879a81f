"""Contract for geocoding providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...models.domain import LatLng


class Geocoder(ABC):
    """Resolves ZIP codes and addresses to points.

    Implementations return None when a value cannot be resolved, including when the
    provider itself fails; callers treat None as "no center point available".
    """

    @abstractmethod
    async def geocode_zip(self, zip_code: str) -> Optional[LatLng]:
        raise NotImplementedError

    @abstractmethod
    async def geocode_address(self, address: str) -> Optional[LatLng]:
        raise NotImplementedError
