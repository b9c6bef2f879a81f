"""Pure filtering and ordering rules applied to search candidates."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ...models.domain import LatLng, LocationRecord, SearchFilters, SearchResultItem
from ..geospatial import distance_miles, validate_coordinates


def _shares_any(values: Iterable[str], wanted: frozenset[str]) -> bool:
    return any(value in wanted for value in values)


def matches_filters(location: LocationRecord, filters: SearchFilters) -> bool:
    if filters.statuses and location.status not in filters.statuses:
        return False
    if filters.current_statuses and location.current_status not in filters.current_statuses:
        return False
    if filters.service_types and not _shares_any(location.service_types, filters.service_types):
        return False
    if filters.languages and not _shares_any(location.languages, filters.languages):
        return False
    if filters.accessibility_features and not filters.accessibility_features.issubset(
        location.accessibility_features
    ):
        return False
    return True


def apply_filters(locations: Sequence[LocationRecord], filters: SearchFilters) -> list[LocationRecord]:
    """Keep locations passing every non-empty filter."""

    return [location for location in locations if matches_filters(location, filters)]


def location_distance(center: Optional[LatLng], location: LocationRecord) -> Optional[float]:
    """Distance from ``center`` or None when there is no center or the record has bad coordinates."""

    if center is None or not validate_coordinates(location.coordinates):
        return None
    return distance_miles(center, location.coordinates)


def build_result_items(
    locations: Sequence[LocationRecord],
    center: Optional[LatLng],
) -> list[SearchResultItem]:
    return [
        SearchResultItem(
            location=location,
            distance_miles=location_distance(center, location),
            current_status=location.current_status,
            last_updated=location.last_status_update,
            rating=location.average_rating,
            review_count=location.review_count,
        )
        for location in locations
    ]


def within_radius(items: Sequence[SearchResultItem], radius_miles: float) -> list[SearchResultItem]:
    """Drop items farther than ``radius_miles``. Items without a distance cannot be placed and are dropped."""

    return [item for item in items if item.distance_miles is not None and item.distance_miles <= radius_miles]


def _sort_key(item: SearchResultItem) -> tuple:
    # distance-annotated items first, then by name; id keeps ties deterministic
    if item.distance_miles is None:
        return (1, 0.0, item.location.name, item.location.id)
    return (0, item.distance_miles, item.location.name, item.location.id)


def sort_result_items(items: Iterable[SearchResultItem]) -> list[SearchResultItem]:
    return sorted(items, key=_sort_key)


def has_more_results(items: Sequence[SearchResultItem], threshold: int = 20) -> bool:
    return len(items) >= threshold
