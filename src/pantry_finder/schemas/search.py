"""Pydantic request/response models for search endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    AddressQuery,
    CoordinatesQuery,
    InvalidQuery,
    LatLng,
    LocationRecord,
    ParsedQuery,
    SearchResultItem,
    ZipcodeQuery,
)
from ..services.search.orchestrator import SearchOutcome


class CoordinatesModel(BaseModel):
    latitude: float
    longitude: float

    @classmethod
    def from_point(cls, point: LatLng) -> "CoordinatesModel":
        return cls(latitude=point.latitude, longitude=point.longitude)


class ParsedQueryModel(BaseModel):
    kind: Literal["zipcode", "coordinates", "address", "invalid"]
    value: Optional[str] = None
    coordinates: Optional[CoordinatesModel] = None
    normalized: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_query(cls, query: ParsedQuery) -> "ParsedQueryModel":
        if isinstance(query, InvalidQuery):
            return cls(kind="invalid", error=query.reason)
        if isinstance(query, CoordinatesQuery):
            return cls(
                kind="coordinates",
                coordinates=CoordinatesModel.from_point(query.value),
                normalized=query.normalized,
            )
        if isinstance(query, (ZipcodeQuery, AddressQuery)):
            return cls(kind=query.kind, value=query.value, normalized=query.normalized)
        raise ValueError(f"Unsupported query type {type(query).__name__}")


class LocationModel(BaseModel):
    id: str
    name: str
    address: str
    coordinates: CoordinatesModel
    status: str
    current_status: Optional[str] = None
    provider_id: Optional[str] = None
    description: Optional[str] = None
    service_types: List[str] = Field(default_factory=list)
    accessibility_features: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    capacity: Optional[int] = None
    current_capacity: Optional[int] = None
    estimated_wait_minutes: Optional[int] = None

    @classmethod
    def from_record(cls, record: LocationRecord) -> "LocationModel":
        return cls(
            id=record.id,
            name=record.name,
            address=record.address,
            coordinates=CoordinatesModel.from_point(record.coordinates),
            status=record.status,
            current_status=record.current_status,
            provider_id=record.provider_id,
            description=record.description,
            service_types=list(record.service_types),
            accessibility_features=list(record.accessibility_features),
            languages=list(record.languages),
            capacity=record.capacity,
            current_capacity=record.current_capacity,
            estimated_wait_minutes=record.estimated_wait_minutes,
        )


class SearchResultModel(BaseModel):
    location: LocationModel
    distance_miles: Optional[float] = None
    current_status: Optional[str] = None
    last_updated: Optional[datetime] = None
    rating: Optional[float] = None
    review_count: int = 0

    @classmethod
    def from_item(cls, item: SearchResultItem) -> "SearchResultModel":
        return cls(
            location=LocationModel.from_record(item.location),
            distance_miles=round(item.distance_miles, 2) if item.distance_miles is not None else None,
            current_status=item.current_status,
            last_updated=item.last_updated,
            rating=item.rating,
            review_count=item.review_count,
        )


class SearchFailureModel(BaseModel):
    kind: str
    message: str


class SearchResponse(BaseModel):
    query: ParsedQueryModel
    center: Optional[CoordinatesModel] = None
    radius_miles: Optional[float] = None
    results: List[SearchResultModel]
    total: int
    has_more: bool
    failure: Optional[SearchFailureModel] = None
    notice: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: SearchOutcome, notice: str | None = None) -> "SearchResponse":
        return cls(
            query=ParsedQueryModel.from_query(outcome.query),
            center=CoordinatesModel.from_point(outcome.center) if outcome.center else None,
            radius_miles=outcome.radius_miles,
            results=[SearchResultModel.from_item(item) for item in outcome.results],
            total=len(outcome.results),
            has_more=outcome.has_more,
            failure=(
                SearchFailureModel(kind=outcome.failure.kind.value, message=outcome.failure.message)
                if outcome.failure
                else None
            ),
            notice=notice,
        )
