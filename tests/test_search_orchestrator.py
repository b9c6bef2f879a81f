import asyncio
from pathlib import Path

import pytest

from pantry_finder.config import Settings
from pantry_finder.data.location_store import StoreHealth, StoreUnavailableError
from pantry_finder.data.memory_store import InMemoryLocationStore, load_locations
from pantry_finder.models.domain import LatLng, LocationRecord, SearchFilters
from pantry_finder.services.geocoding import Geocoder, MockGeocoder
from pantry_finder.services.search import (
    SearchFailureKind,
    SearchOrchestrator,
    parse_location_query,
)
from pantry_finder.services.search.errors import (
    EMPTY_STORE_MESSAGE,
    GEOCODING_FAILED_MESSAGE,
    STORE_UNAVAILABLE_MESSAGE,
)

SEED_FILE = Path(__file__).resolve().parents[1] / "data" / "locations.csv"


def _location(location_id: str, name: str, lat: float, lon: float, **kwargs) -> LocationRecord:
    kwargs.setdefault("status", "active")
    return LocationRecord(
        id=location_id,
        name=name,
        address=kwargs.pop("address", "1 Main St, Chicago, IL 60601"),
        coordinates=LatLng(lat, lon),
        **kwargs,
    )


class FixedGeocoder(Geocoder):
    def __init__(self, point=None, error: Exception | None = None) -> None:
        self.point = point
        self.error = error
        self.calls: list[str] = []

    async def geocode_zip(self, zip_code):
        self.calls.append(zip_code)
        if self.error:
            raise self.error
        return self.point

    async def geocode_address(self, address):
        self.calls.append(address)
        if self.error:
            raise self.error
        return self.point


class FailingStore(InMemoryLocationStore):
    async def find_by_zip_region(self, zip_code):
        raise StoreUnavailableError("connection refused")

    async def find_by_radius(self, center, radius_km):
        raise StoreUnavailableError("connection refused")

    async def find_by_text(self, search_text, *, service_types=None):
        raise StoreUnavailableError("connection refused")

    async def health(self):
        return StoreHealth(connected=False, record_count=0)


@pytest.fixture()
def config():
    return Settings(locations_file=SEED_FILE, geocoder_base_url=None)


@pytest.fixture()
def seeded_store():
    load_locations.cache_clear()
    return InMemoryLocationStore.from_csv(SEED_FILE)


def _search(orchestrator, raw, filters=None):
    return asyncio.run(orchestrator.search(parse_location_query(raw), filters))


def test_invalid_query_reports_reason_without_touching_store(config):
    orchestrator = SearchOrchestrator(FailingStore(), MockGeocoder(), config)

    outcome = _search(orchestrator, "9021")

    assert outcome.ok is False
    assert outcome.failure.kind is SearchFailureKind.INVALID_QUERY
    assert outcome.failure.message == "Please enter a valid 5-digit ZIP code"
    assert outcome.results == ()


def test_zip_search_ranks_region_matches_by_distance(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "10001")

    assert outcome.ok
    assert [item.location.id for item in outcome.results] == ["loc-003", "loc-001"]
    assert outcome.center == LatLng(40.7484, -73.9967)
    assert outcome.radius_miles is None
    assert all(item.distance_miles is not None for item in outcome.results)


def test_zip_plus_four_matches_same_region(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "10001-1234")

    assert {item.location.id for item in outcome.results} == {"loc-001", "loc-003"}


def test_zip_search_without_center_sorts_by_name(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, FixedGeocoder(point=None), config)

    outcome = _search(orchestrator, "10001")

    assert outcome.center is None
    assert [item.location.name for item in outcome.results] == [
        "Chelsea Community Pantry",
        "Community Food Bank - Main Location",
    ]
    assert all(item.distance_miles is None for item in outcome.results)


def test_zip_search_survives_geocoder_errors(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, FixedGeocoder(error=RuntimeError("geocoder down")), config)

    outcome = _search(orchestrator, "97301")

    assert outcome.ok
    assert {item.location.id for item in outcome.results} == {"loc-006", "loc-007"}


def test_zip_search_with_radius_applies_cutoff(config):
    store = InMemoryLocationStore(
        [
            _location("near", "Near Pantry", 41.8846, -87.6247),
            _location("far", "Far Pantry", 42.5, -87.6247),
        ]
    )
    orchestrator = SearchOrchestrator(store, MockGeocoder(), config)

    outcome = _search(orchestrator, "60601", SearchFilters(radius_miles=5))

    assert [item.location.id for item in outcome.results] == ["near"]
    assert outcome.radius_miles == 5


def test_zip_search_ignores_out_of_range_geocoder_point(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, FixedGeocoder(point=LatLng(999.0, 0.0)), config)

    outcome = _search(orchestrator, "10001", SearchFilters(radius_miles=5))

    assert outcome.ok
    assert outcome.center is None
    assert outcome.radius_miles is None
    assert [item.location.id for item in outcome.results] == ["loc-003", "loc-001"]
    assert all(item.distance_miles is None for item in outcome.results)


def test_zip_search_with_no_region_match(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "33101")

    assert outcome.failure.kind is SearchFailureKind.NO_RESULTS_IN_RADIUS
    assert "33101" in outcome.failure.message


def test_coordinate_search_uses_default_radius_and_orders_by_distance(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "40.7128,-74.0060")

    assert outcome.radius_miles == 25
    assert outcome.center == LatLng(40.7128, -74.006)
    assert [item.location.id for item in outcome.results] == ["loc-002", "loc-003", "loc-001"]
    distances = [item.distance_miles for item in outcome.results]
    assert distances == sorted(distances)
    assert all(distance <= 25 for distance in distances)


def test_coordinate_search_with_no_nearby_locations(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "0,0")

    assert outcome.failure.kind is SearchFailureKind.NO_RESULTS_IN_RADIUS
    assert outcome.failure.message == "No locations found within 25 miles. Try increasing the search radius."
    assert outcome.center == LatLng(0.0, 0.0)


def test_filters_that_exclude_everything_are_not_an_empty_store(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "37.7749,-122.4194", SearchFilters(statuses=frozenset({"active"})))

    assert outcome.failure.kind is SearchFailureKind.NO_RESULTS_IN_RADIUS


def test_status_filter_keeps_pending_listing(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "37.7749,-122.4194", SearchFilters(statuses=frozenset({"pending"})))

    assert [item.location.id for item in outcome.results] == ["loc-008"]
    assert outcome.results[0].rating is None


def test_current_status_filter(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, MockGeocoder(), config)

    outcome = _search(orchestrator, "97301", SearchFilters(current_statuses=frozenset({"open"})))

    assert [item.location.id for item in outcome.results] == ["loc-006"]


def test_address_text_match_has_no_distances(config, seeded_store):
    geocoder = FixedGeocoder(point=LatLng(0.0, 0.0))
    orchestrator = SearchOrchestrator(seeded_store, geocoder, config)

    outcome = _search(orchestrator, "Soup Kitchen")

    assert [item.location.id for item in outcome.results] == ["loc-002"]
    assert outcome.results[0].distance_miles is None
    assert outcome.center is None
    assert geocoder.calls == []


def test_address_falls_back_to_geocoded_radius_search(config):
    store = InMemoryLocationStore(
        [
            _location("a", "Loop Food Share", 41.8846, -87.6247),
            _location("b", "North Side Pantry", 41.9484, -87.6553),
            _location("c", "Milwaukee Pantry", 43.0389, -87.9065),
        ]
    )
    geocoder = FixedGeocoder(point=LatLng(41.9484, -87.6553))
    orchestrator = SearchOrchestrator(store, geocoder, config)

    outcome = _search(orchestrator, "Wrigleyville")

    assert geocoder.calls == ["Wrigleyville"]
    assert outcome.radius_miles == 15
    assert outcome.center == LatLng(41.9484, -87.6553)
    assert [item.location.id for item in outcome.results] == ["b", "a"]


def test_address_fallback_respects_explicit_radius(config):
    store = InMemoryLocationStore(
        [
            _location("a", "Loop Food Share", 41.8846, -87.6247),
            _location("b", "North Side Pantry", 41.9484, -87.6553),
        ]
    )
    orchestrator = SearchOrchestrator(store, FixedGeocoder(point=LatLng(41.9484, -87.6553)), config)

    outcome = _search(orchestrator, "Wrigleyville", SearchFilters(radius_miles=1))

    assert [item.location.id for item in outcome.results] == ["b"]


def test_unresolvable_address_reports_geocoding_failure(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, FixedGeocoder(point=None), config)

    outcome = _search(orchestrator, "Nowhereville")

    assert outcome.failure.kind is SearchFailureKind.GEOCODING_FAILED
    assert outcome.failure.message == GEOCODING_FAILED_MESSAGE


@pytest.mark.parametrize("point", [LatLng(float("nan"), 0.0), LatLng(45.0, 200.0)])
def test_address_fallback_rejects_invalid_geocoder_point(config, seeded_store, point):
    orchestrator = SearchOrchestrator(seeded_store, FixedGeocoder(point=point), config)

    outcome = _search(orchestrator, "zzz qqq")

    assert outcome.failure.kind is SearchFailureKind.GEOCODING_FAILED
    assert outcome.failure.message == GEOCODING_FAILED_MESSAGE
    assert outcome.center is None


def test_geocoder_exception_is_not_leaked_to_user(config, seeded_store):
    orchestrator = SearchOrchestrator(seeded_store, FixedGeocoder(error=RuntimeError("boom: api key")), config)

    outcome = _search(orchestrator, "Nowhereville")

    assert outcome.failure.kind is SearchFailureKind.GEOCODING_FAILED
    assert "boom" not in outcome.failure.message


def test_store_unavailable(config):
    orchestrator = SearchOrchestrator(FailingStore(), MockGeocoder(), config)

    for raw in ("10001", "40.7128,-74.0060", "Soup Kitchen"):
        outcome = _search(orchestrator, raw)
        assert outcome.failure.kind is SearchFailureKind.STORE_UNAVAILABLE
        assert outcome.failure.message == STORE_UNAVAILABLE_MESSAGE
        assert outcome.results == ()


def test_empty_store(config):
    orchestrator = SearchOrchestrator(InMemoryLocationStore(), MockGeocoder(), config)

    outcome = _search(orchestrator, "40.7128,-74.0060")

    assert outcome.failure.kind is SearchFailureKind.EMPTY_STORE
    assert outcome.failure.message == EMPTY_STORE_MESSAGE


def test_has_more_when_result_count_reaches_threshold(config):
    store = InMemoryLocationStore(
        [_location(f"loc-{i:02d}", f"Pantry {i:02d}", 41.88 + i * 0.001, -87.62) for i in range(20)]
    )
    orchestrator = SearchOrchestrator(store, MockGeocoder(), config)

    full = _search(orchestrator, "41.88,-87.62")
    trimmed = SearchOrchestrator(InMemoryLocationStore(store._locations[:19]), MockGeocoder(), config)

    assert len(full.results) == 20
    assert full.has_more is True
    assert _search(trimmed, "41.88,-87.62").has_more is False
