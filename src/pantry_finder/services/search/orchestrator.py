"""High-level orchestration for location searches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ...config import Settings, settings
from ...data.location_store import LocationStore
from ...models.domain import (
    AddressQuery,
    CoordinatesQuery,
    InvalidQuery,
    LatLng,
    LocationRecord,
    ParsedQuery,
    SearchFilters,
    SearchResultItem,
    ZipcodeQuery,
)
from ..geocoding.base import Geocoder
from ..geospatial import miles_to_km, validate_coordinates
from .errors import (
    EMPTY_STORE_MESSAGE,
    GEOCODING_FAILED_MESSAGE,
    STORE_UNAVAILABLE_MESSAGE,
    SearchError,
    SearchFailure,
    SearchFailureKind,
    no_results_for_text_message,
    no_results_for_zip_message,
    no_results_in_radius_message,
)
from .policy import apply_filters, build_result_items, has_more_results, sort_result_items, within_radius


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Ranked results of one search, or the failure that replaced them."""

    query: ParsedQuery
    results: tuple[SearchResultItem, ...] = ()
    center: Optional[LatLng] = None
    radius_miles: Optional[float] = None
    has_more: bool = False
    failure: Optional[SearchFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(slots=True)
class _Candidates:
    locations: Sequence[LocationRecord]
    center: Optional[LatLng] = None
    radius_miles: Optional[float] = None


class SearchOrchestrator:
    """Resolves a parsed query against a store and geocoder and ranks the matches."""

    def __init__(self, store: LocationStore, geocoder: Geocoder, config: Settings | None = None) -> None:
        self.store = store
        self.geocoder = geocoder
        self.settings = config or settings

    async def search(self, query: ParsedQuery, filters: SearchFilters | None = None) -> SearchOutcome:
        filters = filters or SearchFilters()
        if isinstance(query, InvalidQuery):
            return SearchOutcome(
                query=query,
                failure=SearchFailure(kind=SearchFailureKind.INVALID_QUERY, message=query.reason),
            )

        candidates = _Candidates(locations=())
        try:
            candidates = await self._fetch_candidates(query, filters)
            items = self._rank(candidates, filters)
            if not items:
                raise await self._classify_empty(query, candidates)
        except SearchError as exc:
            logging.info(f"Search for {query.kind} '{query.normalized}' ended with {exc.kind.value}: {exc.message}")
            return SearchOutcome(
                query=query,
                center=candidates.center,
                radius_miles=candidates.radius_miles,
                failure=exc.to_failure(),
            )
        except ConnectionError as exc:
            logging.error(f"Location store unavailable while searching '{query.normalized}': {exc}")
            return SearchOutcome(
                query=query,
                center=candidates.center,
                radius_miles=candidates.radius_miles,
                failure=SearchFailure(kind=SearchFailureKind.STORE_UNAVAILABLE, message=STORE_UNAVAILABLE_MESSAGE),
            )

        results = tuple(items)
        return SearchOutcome(
            query=query,
            results=results,
            center=candidates.center,
            radius_miles=candidates.radius_miles,
            has_more=has_more_results(results, self.settings.has_more_threshold),
        )

    async def _fetch_candidates(self, query: ParsedQuery, filters: SearchFilters) -> _Candidates:
        if isinstance(query, ZipcodeQuery):
            locations = await self.store.find_by_zip_region(query.value)
            center = await self._best_effort_zip_center(query.value)
            radius = filters.radius_miles if center is not None else None
            return _Candidates(locations=locations, center=center, radius_miles=radius)

        if isinstance(query, CoordinatesQuery):
            radius = filters.radius_miles or self.settings.default_coordinate_radius_miles
            locations = await self.store.find_by_radius(query.value, miles_to_km(radius))
            return _Candidates(locations=locations, center=query.value, radius_miles=radius)

        if isinstance(query, AddressQuery):
            text_matches = await self.store.find_by_text(
                query.value,
                service_types=sorted(filters.service_types) or None,
            )
            if text_matches:
                return _Candidates(locations=text_matches)

            logging.info(f"No text matches for '{query.value}', falling back to geocoded radius search")
            center = await self._geocode_address(query.value)
            radius = filters.radius_miles or self.settings.default_address_radius_miles
            locations = await self.store.find_by_radius(center, miles_to_km(radius))
            return _Candidates(locations=locations, center=center, radius_miles=radius)

        raise ValueError(f"Unsupported query kind '{getattr(query, 'kind', query)}'.")

    async def _best_effort_zip_center(self, zip_code: str) -> Optional[LatLng]:
        try:
            center = await self.geocoder.geocode_zip(zip_code)
        except Exception as exc:
            logging.warning(f"ZIP geocoding failed for {zip_code}; continuing without distances: {exc}")
            return None
        if center is not None and not validate_coordinates(center):
            logging.warning(f"Geocoder returned invalid coordinates {center} for ZIP {zip_code}; ignoring")
            return None
        return center

    async def _geocode_address(self, address: str) -> LatLng:
        try:
            center = await self.geocoder.geocode_address(address)
        except Exception as exc:
            logging.warning(f"Address geocoding failed for '{address}': {exc}")
            raise SearchError(SearchFailureKind.GEOCODING_FAILED, GEOCODING_FAILED_MESSAGE) from exc
        if center is None:
            raise SearchError(SearchFailureKind.GEOCODING_FAILED, GEOCODING_FAILED_MESSAGE)
        if not validate_coordinates(center):
            logging.warning(f"Geocoder returned invalid coordinates {center} for '{address}'")
            raise SearchError(SearchFailureKind.GEOCODING_FAILED, GEOCODING_FAILED_MESSAGE)
        return center

    @staticmethod
    def _rank(candidates: _Candidates, filters: SearchFilters) -> list[SearchResultItem]:
        locations = apply_filters(candidates.locations, filters)
        items = build_result_items(locations, candidates.center)
        if candidates.radius_miles is not None:
            items = within_radius(items, candidates.radius_miles)
        return sort_result_items(items)

    async def _classify_empty(self, query: ParsedQuery, candidates: _Candidates) -> SearchError:
        health = await self.store.health()
        if not health.connected:
            return SearchError(SearchFailureKind.STORE_UNAVAILABLE, STORE_UNAVAILABLE_MESSAGE)
        if health.record_count == 0:
            return SearchError(SearchFailureKind.EMPTY_STORE, EMPTY_STORE_MESSAGE)

        if candidates.radius_miles is not None:
            message = no_results_in_radius_message(candidates.radius_miles)
        elif isinstance(query, ZipcodeQuery):
            message = no_results_for_zip_message(query.value)
        else:
            message = no_results_for_text_message(query.normalized)
        return SearchError(SearchFailureKind.NO_RESULTS_IN_RADIUS, message)
