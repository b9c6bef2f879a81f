"""Location stores and dataset loading."""

from .location_store import LocationStore, StoreHealth, StoreUnavailableError
from .memory_store import InMemoryLocationStore, load_locations

__all__ = [
    "LocationStore",
    "StoreHealth",
    "StoreUnavailableError",
    "InMemoryLocationStore",
    "load_locations",
]
