"""Failure classification for location searches."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SearchFailureKind(str, Enum):
    INVALID_QUERY = "invalid_query"
    STORE_UNAVAILABLE = "store_unavailable"
    EMPTY_STORE = "empty_store"
    NO_RESULTS_IN_RADIUS = "no_results_in_radius"
    GEOCODING_FAILED = "geocoding_failed"


STORE_UNAVAILABLE_MESSAGE = "Database connection failed. Please try again later."
EMPTY_STORE_MESSAGE = "No locations found in database."
GEOCODING_FAILED_MESSAGE = (
    "Failed to search by coordinates: we could not find that address. "
    "Please try a different address or ZIP code."
)


def no_results_in_radius_message(radius_miles: float) -> str:
    return f"No locations found within {radius_miles:g} miles. Try increasing the search radius."


def no_results_for_zip_message(zip_code: str) -> str:
    return f"No locations found for ZIP code {zip_code}. Try searching by address or your current location."


def no_results_for_text_message(text: str) -> str:
    return f"No locations found matching '{text}'. Try a ZIP code or a broader search."


@dataclass(frozen=True, slots=True)
class SearchFailure:
    """User-facing failure plus its internal classification."""

    kind: SearchFailureKind
    message: str


class SearchError(Exception):
    """Raised inside the orchestrator and converted to a SearchFailure at its boundary."""

    def __init__(self, kind: SearchFailureKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_failure(self) -> SearchFailure:
        return SearchFailure(kind=self.kind, message=self.message)
