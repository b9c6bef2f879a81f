"""Location store backed by a Supabase (PostgREST) table."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Callable, Iterable, Optional, Sequence

from supabase import Client

from ..models.domain import LatLng, LocationRecord
from ..services.geospatial import bounding_box, distance_miles, km_to_miles, validate_coordinates
from .location_store import LocationStore, StoreHealth, StoreUnavailableError, matches_text
from .records import record_from_row

logger = logging.getLogger(__name__)

# characters with meaning inside a PostgREST or() filter
_FILTER_UNSAFE = re.compile(r"[,()*%\\]")
TEXT_SEARCH_COLUMNS = ("name", "address", "description")


class SupabaseLocationStore(LocationStore):
    def __init__(self, client: Client, table: str = "locations") -> None:
        self.client = client
        self.table = table

    async def _execute(self, build: Callable[[], Any], action: str) -> Any:
        def run() -> Any:
            return build().execute()

        try:
            return await asyncio.to_thread(run)
        except Exception as exc:
            logger.error(f"Supabase {action} query on '{self.table}' failed: {exc}")
            raise StoreUnavailableError(f"Database connection failed during {action}: {exc}") from exc

    def _records(self, rows: Iterable[dict]) -> list[LocationRecord]:
        records: list[LocationRecord] = []
        for row in rows or []:
            try:
                record = record_from_row(row)
            except ValueError as exc:
                logger.warning(f"Skipping malformed location row {row.get('id')}: {exc}")
                continue
            if record is not None and validate_coordinates(record.coordinates):
                records.append(record)
        return records

    async def find_by_zip_region(self, zip_code: str) -> Sequence[LocationRecord]:
        base_zip = zip_code[:5]
        response = await self._execute(
            lambda: self.client.table(self.table).select("*").ilike("address", f"%{base_zip}%"),
            "zip",
        )
        return [
            record
            for record in self._records(response.data)
            if record.zip_code is not None and record.zip_code[:5] == base_zip
        ]

    async def find_by_radius(self, center: LatLng, radius_km: float) -> Sequence[LocationRecord]:
        radius_miles = km_to_miles(radius_km)
        lat_min, lat_max, lon_min, lon_max = bounding_box(center, radius_miles)
        response = await self._execute(
            lambda: self.client.table(self.table)
            .select("*")
            .gte("latitude", lat_min)
            .lte("latitude", lat_max)
            .gte("longitude", lon_min)
            .lte("longitude", lon_max),
            "radius",
        )
        return [
            record
            for record in self._records(response.data)
            if distance_miles(center, record.coordinates) <= radius_miles
        ]

    async def find_by_text(
        self,
        search_text: str,
        *,
        service_types: Optional[Iterable[str]] = None,
    ) -> Sequence[LocationRecord]:
        terms = [_FILTER_UNSAFE.sub("", term) for term in search_text.lower().split()]
        terms = [term for term in terms if term]
        if not terms:
            return []
        clauses = ",".join(f"{column}.ilike.%{term}%" for term in terms for column in TEXT_SEARCH_COLUMNS)
        response = await self._execute(
            lambda: self.client.table(self.table).select("*").or_(clauses),
            "text",
        )
        wanted = list(service_types) if service_types else None
        return [record for record in self._records(response.data) if matches_text(record, " ".join(terms), wanted)]

    async def health(self) -> StoreHealth:
        try:
            response = await self._execute(
                lambda: self.client.table(self.table).select("id", count="exact").limit(1),
                "health",
            )
        except StoreUnavailableError:
            return StoreHealth(connected=False, record_count=0)
        count = response.count if response.count is not None else len(response.data or [])
        return StoreHealth(connected=True, record_count=count)
