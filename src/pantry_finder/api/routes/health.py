"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from ..dependencies import get_services

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
async def check_database(request: Request) -> dict:
    """Check location store connectivity and record count."""
    services = get_services(request)
    health = await services.store.health()
    if not health.connected:
        message = "Database connection failed. Please try again later."
    elif health.record_count == 0:
        message = "Database connected but no locations found. Seed the locations table or file."
    else:
        message = f"Database connected. Found {health.record_count} locations."
    return {
        "backend": services.store_backend,
        "configured": services.store_backend != "memory" or services.settings.locations_file.exists(),
        "connected": health.connected,
        "record_count": health.record_count,
        "message": message,
    }
