"""Classify raw search input into a typed location query."""

from __future__ import annotations

import re
from typing import Any

from ...models.domain import (
    AddressQuery,
    CoordinatesQuery,
    InvalidQuery,
    LatLng,
    ParsedQuery,
    ZipcodeQuery,
)
from ..geospatial import validate_coordinates

ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$", re.ASCII)
# Truncated ZIP entry such as "9021" or "90210-12"; never an address.
ZIP_ATTEMPT_PATTERN = re.compile(r"^\d{1,5}(-\d{0,4})?$", re.ASCII)
COORDINATES_PATTERN = re.compile(r"^(-?\d+\.?\d*),\s*(-?\d+\.?\d*)$", re.ASCII)

EMPTY_QUERY_MESSAGE = "Empty or invalid query"
BLANK_QUERY_MESSAGE = "Empty query after normalization"
INVALID_ZIP_MESSAGE = "Please enter a valid 5-digit ZIP code"


def validate_zip_code(zip_code: Any) -> bool:
    """Validate a US ZIP code (12345 or 12345-6789). Surrounding whitespace is rejected."""

    if not zip_code or not isinstance(zip_code, str):
        return False
    if zip_code != zip_code.strip():
        return False
    return ZIP_PATTERN.match(zip_code) is not None


def parse_location_query(query: Any) -> ParsedQuery:
    """Parse a free-form search string. Never raises."""

    if not query or not isinstance(query, str):
        return InvalidQuery(reason=EMPTY_QUERY_MESSAGE)

    normalized = query.strip()
    if not normalized:
        return InvalidQuery(reason=BLANK_QUERY_MESSAGE)

    if validate_zip_code(normalized):
        return ZipcodeQuery(value=normalized, normalized=normalized)

    if ZIP_ATTEMPT_PATTERN.match(normalized):
        return InvalidQuery(reason=INVALID_ZIP_MESSAGE)

    match = COORDINATES_PATTERN.match(normalized)
    if match:
        point = LatLng(latitude=float(match.group(1)), longitude=float(match.group(2)))
        if validate_coordinates(point):
            return CoordinatesQuery(value=point, normalized=normalized)

    return AddressQuery(value=normalized, normalized=normalized)
