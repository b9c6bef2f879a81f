"""Coerce raw rows (CSV or database) into LocationRecord objects."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ..models.domain import LatLng, LocationRecord


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def _coerce_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", ""))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    return int(number) if number is not None else None


def _coerce_tags(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [str(item) for item in value]
    else:
        text = str(value)
        separator = "|" if "|" in text else ";" if ";" in text else ","
        items = text.split(separator)
    return tuple(item.strip() for item in items if item and item.strip())


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Unable to parse timestamp from value '{value}'") from exc


def record_from_row(row: Mapping[str, Any]) -> Optional[LocationRecord]:
    """Build a LocationRecord, or return None when the row has no id, name or coordinates."""

    lat = _coerce_float(_first(row, "latitude", "Latitude", "lat"))
    lon = _coerce_float(_first(row, "longitude", "Longitude", "lng", "lon"))
    if lat is None or lon is None:
        return None

    location_id = _coerce_str(_first(row, "id", "Id", "location_id"))
    name = _coerce_str(_first(row, "name", "Name"))
    if not location_id or not name:
        return None

    return LocationRecord(
        id=location_id,
        name=name,
        address=_coerce_str(_first(row, "address", "Address")) or "",
        coordinates=LatLng(latitude=lat, longitude=lon),
        status=_coerce_str(_first(row, "status", "Status")) or "active",
        current_status=_coerce_str(_first(row, "current_status", "currentStatus")),
        provider_id=_coerce_str(_first(row, "provider_id", "providerId")),
        description=_coerce_str(_first(row, "description", "Description")),
        service_types=_coerce_tags(_first(row, "service_types", "serviceTypes", "services")),
        accessibility_features=_coerce_tags(_first(row, "accessibility_features", "accessibilityFeatures")),
        languages=_coerce_tags(_first(row, "languages", "Languages")),
        capacity=_coerce_int(_first(row, "capacity")),
        current_capacity=_coerce_int(_first(row, "current_capacity", "currentCapacity")),
        estimated_wait_minutes=_coerce_int(_first(row, "estimated_wait_time", "estimatedWaitTime")),
        average_rating=_coerce_float(_first(row, "average_rating", "averageRating")),
        review_count=_coerce_int(_first(row, "review_count", "reviewCount")) or 0,
        last_status_update=_coerce_datetime(_first(row, "last_status_update", "lastStatusUpdate")),
        created_at=_coerce_datetime(_first(row, "created_at", "createdAt")),
        updated_at=_coerce_datetime(_first(row, "updated_at", "updatedAt")),
        raw=dict(row),
    )
