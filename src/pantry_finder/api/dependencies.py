"""Composition root: builds the store and geocoder handed to request handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from ..config import Settings
from ..data.location_store import LocationStore
from ..data.memory_store import InMemoryLocationStore
from ..db.supabase import create_supabase_client
from ..services.geocoding import Geocoder, MockGeocoder, NominatimGeocoder
from ..services.search import SearchOrchestrator


@dataclass(slots=True)
class SearchServices:
    settings: Settings
    store: LocationStore
    geocoder: Geocoder
    store_backend: str

    @property
    def orchestrator(self) -> SearchOrchestrator:
        return SearchOrchestrator(self.store, self.geocoder, self.settings)


def build_store(config: Settings) -> tuple[LocationStore, str]:
    if config.supabase_configured:
        client = create_supabase_client(config)
        if client is not None:
            from ..data.supabase_store import SupabaseLocationStore

            return SupabaseLocationStore(client, table=config.supabase_locations_table), "supabase"
        logging.warning("Falling back to the in-memory location store")

    if config.locations_file.exists():
        return InMemoryLocationStore.from_csv(config.locations_file), "memory"

    logging.warning(f"Locations file not found at {config.locations_file}; starting with an empty store")
    return InMemoryLocationStore(), "memory"


def build_geocoder(config: Settings) -> Geocoder:
    if config.geocoder_base_url:
        return NominatimGeocoder(config=config)
    logging.info("No geocoder configured; using deterministic mock geocoder")
    return MockGeocoder()


def build_services(config: Settings) -> SearchServices:
    store, backend = build_store(config)
    return SearchServices(settings=config, store=store, geocoder=build_geocoder(config), store_backend=backend)


def get_services(request: Request) -> SearchServices:
    return request.app.state.search_services
