"""Contract for location stores queried by the search orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..models.domain import LatLng, LocationRecord


class StoreUnavailableError(ConnectionError):
    """The backing store could not be reached or answered with an error."""


@dataclass(frozen=True, slots=True)
class StoreHealth:
    connected: bool
    record_count: int


def matches_text(location: LocationRecord, search_text: str, service_types: Optional[Iterable[str]] = None) -> bool:
    """Return True if any whitespace-separated term appears in the location's searchable text."""

    if service_types:
        wanted = set(service_types)
        if not any(service_type in wanted for service_type in location.service_types):
            return False

    haystack = " ".join(
        [location.name, location.address, location.description or "", *location.service_types]
    ).lower()
    terms = [term for term in search_text.lower().split() if term]
    return any(term in haystack for term in terms)


class LocationStore(ABC):
    """Read-only query surface over stored locations."""

    @abstractmethod
    async def find_by_zip_region(self, zip_code: str) -> Sequence[LocationRecord]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_radius(self, center: LatLng, radius_km: float) -> Sequence[LocationRecord]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_text(
        self,
        search_text: str,
        *,
        service_types: Optional[Iterable[str]] = None,
    ) -> Sequence[LocationRecord]:
        raise NotImplementedError

    @abstractmethod
    async def health(self) -> StoreHealth:
        """Probe connectivity. Never raises; failures report ``connected=False``."""
        raise NotImplementedError
