"""In-memory location store seeded from a CSV dataset."""

from __future__ import annotations

import csv
import functools
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..config import settings
from ..models.domain import LatLng, LocationRecord
from ..services.geospatial import distance_miles, km_to_miles, validate_coordinates
from .location_store import LocationStore, StoreHealth, matches_text
from .records import record_from_row

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=4)
def load_locations(source: Optional[Path] = None) -> tuple[LocationRecord, ...]:
    """Load locations from the configured CSV file."""

    csv_path = source or settings.locations_file
    if not csv_path.exists():
        raise FileNotFoundError(f"Locations file not found: {csv_path}")

    locations: list[LocationRecord] = []
    skipped = 0
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Locations file '{csv_path}' is missing a header row.")
        for row in reader:
            record = record_from_row(row)
            if record is None or not validate_coordinates(record.coordinates):
                skipped += 1
                continue
            locations.append(record)
    if skipped:
        logger.warning(f"Skipped {skipped} rows without a usable id, name or coordinates in {csv_path}")
    logger.info(f"Loaded {len(locations)} locations from {csv_path}")
    return tuple(locations)


class InMemoryLocationStore(LocationStore):
    """Serves queries from a fixed tuple of records."""

    def __init__(self, locations: Iterable[LocationRecord] = ()) -> None:
        self._locations = tuple(locations)

    @classmethod
    def from_csv(cls, source: Optional[Path] = None) -> "InMemoryLocationStore":
        return cls(load_locations(source))

    async def find_by_zip_region(self, zip_code: str) -> Sequence[LocationRecord]:
        base_zip = zip_code[:5]
        return [
            location
            for location in self._locations
            if location.zip_code is not None and location.zip_code[:5] == base_zip
        ]

    async def find_by_radius(self, center: LatLng, radius_km: float) -> Sequence[LocationRecord]:
        radius_miles = km_to_miles(radius_km)
        return [
            location
            for location in self._locations
            if validate_coordinates(location.coordinates)
            and distance_miles(center, location.coordinates) <= radius_miles
        ]

    async def find_by_text(
        self,
        search_text: str,
        *,
        service_types: Optional[Iterable[str]] = None,
    ) -> Sequence[LocationRecord]:
        return [location for location in self._locations if matches_text(location, search_text, service_types)]

    async def health(self) -> StoreHealth:
        return StoreHealth(connected=True, record_count=len(self._locations))
