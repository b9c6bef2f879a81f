"""Domain models for food-assistance locations and search queries."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional, Union

ZIP_IN_ADDRESS_PATTERN = re.compile(r"\b\d{5}(?:-\d{4})?\b")


@dataclass(frozen=True, slots=True)
class LatLng:
    """A geographic point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(slots=True)
class LocationRecord:
    """A food-assistance location as stored in the backing database."""

    id: str
    name: str
    address: str
    coordinates: LatLng
    status: str
    current_status: Optional[str] = None
    provider_id: Optional[str] = None
    description: Optional[str] = None
    service_types: tuple[str, ...] = ()
    accessibility_features: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    capacity: Optional[int] = None
    current_capacity: Optional[int] = None
    estimated_wait_minutes: Optional[int] = None
    average_rating: Optional[float] = None
    review_count: int = 0
    last_status_update: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    raw: dict = field(default_factory=dict)

    @property
    def zip_code(self) -> Optional[str]:
        # ZIP follows the state, so a five-digit house number never wins
        matches = ZIP_IN_ADDRESS_PATTERN.findall(self.address or "")
        return matches[-1] if matches else None


@dataclass(frozen=True, slots=True)
class SearchResultItem:
    """A location annotated for one search. Never mutated after construction."""

    location: LocationRecord
    distance_miles: Optional[float]
    current_status: Optional[str]
    last_updated: Optional[datetime]
    rating: Optional[float]
    review_count: int


@dataclass(frozen=True, slots=True)
class ZipcodeQuery:
    value: str
    normalized: str
    kind: Literal["zipcode"] = "zipcode"


@dataclass(frozen=True, slots=True)
class CoordinatesQuery:
    value: LatLng
    normalized: str
    kind: Literal["coordinates"] = "coordinates"


@dataclass(frozen=True, slots=True)
class AddressQuery:
    value: str
    normalized: str
    kind: Literal["address"] = "address"


@dataclass(frozen=True, slots=True)
class InvalidQuery:
    reason: str
    kind: Literal["invalid"] = "invalid"


ParsedQuery = Union[ZipcodeQuery, CoordinatesQuery, AddressQuery, InvalidQuery]


@dataclass(slots=True)
class SearchFilters:
    """Optional constraints applied on top of the query itself."""

    radius_miles: Optional[float] = None
    statuses: frozenset[str] = frozenset()
    current_statuses: frozenset[str] = frozenset()
    service_types: frozenset[str] = frozenset()
    accessibility_features: frozenset[str] = frozenset()
    languages: frozenset[str] = frozenset()
