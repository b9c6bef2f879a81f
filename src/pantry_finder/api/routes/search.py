"""Location search endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from ...models.domain import CoordinatesQuery, SearchFilters
from ...schemas.search import ParsedQueryModel, SearchResponse
from ...services.geolocation import FixedPositionProvider, Position, resolve_search_center
from ...services.search import SearchFailureKind, SearchOutcome, parse_location_query
from ..dependencies import get_services

router = APIRouter(prefix="/search", tags=["search"])


def _as_set(values: Optional[List[str]]) -> frozenset[str]:
    """Accept repeated query params as well as comma-separated values."""
    if not values:
        return frozenset()
    items: set[str] = set()
    for value in values:
        items.update(part.strip() for part in value.split(",") if part.strip())
    return frozenset(items)


def _to_response(outcome: SearchOutcome, notice: str | None = None) -> SearchResponse:
    if outcome.failure is not None:
        if outcome.failure.kind is SearchFailureKind.INVALID_QUERY:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=outcome.failure.message)
        if outcome.failure.kind is SearchFailureKind.STORE_UNAVAILABLE:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=outcome.failure.message)
    return SearchResponse.from_outcome(outcome, notice=notice)


@router.get("/parse", response_model=ParsedQueryModel, status_code=status.HTTP_200_OK)
def parse_query(q: str = Query(default="", description="ZIP code, address or 'lat,lng'")) -> ParsedQueryModel:
    return ParsedQueryModel.from_query(parse_location_query(q))


@router.get("", response_model=SearchResponse, status_code=status.HTTP_200_OK)
async def search_locations(
    request: Request,
    q: str = Query(default="", description="ZIP code, address or 'lat,lng'"),
    radius: float | None = Query(default=None, gt=0, le=500, description="Search radius in miles"),
    status_filter: Optional[List[str]] = Query(default=None, alias="status"),
    current_status: Optional[List[str]] = Query(default=None),
    service_type: Optional[List[str]] = Query(default=None),
    accessibility: Optional[List[str]] = Query(default=None),
    language: Optional[List[str]] = Query(default=None),
) -> SearchResponse:
    services = get_services(request)
    filters = SearchFilters(
        radius_miles=radius,
        statuses=_as_set(status_filter),
        current_statuses=_as_set(current_status),
        service_types=_as_set(service_type),
        accessibility_features=_as_set(accessibility),
        languages=_as_set(language),
    )
    outcome = await services.orchestrator.search(parse_location_query(q), filters)
    return _to_response(outcome)


@router.get("/nearby", response_model=SearchResponse, status_code=status.HTTP_200_OK)
async def search_nearby(
    request: Request,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    accuracy: float | None = Query(default=None, ge=0),
    radius: float | None = Query(default=None, gt=0, le=500, description="Search radius in miles"),
    current_status: Optional[List[str]] = Query(default=None),
) -> SearchResponse:
    services = get_services(request)
    position = Position(latitude=lat, longitude=lng, accuracy=accuracy) if lat is not None and lng is not None else None
    center = await resolve_search_center(
        FixedPositionProvider(position),
        radius_miles=radius,
        config=services.settings,
    )
    query = CoordinatesQuery(
        value=center.point,
        normalized=f"{center.point.latitude},{center.point.longitude}",
    )
    filters = SearchFilters(radius_miles=center.radius_miles, current_statuses=_as_set(current_status))
    outcome = await services.orchestrator.search(query, filters)
    return _to_response(outcome, notice=center.notice)
