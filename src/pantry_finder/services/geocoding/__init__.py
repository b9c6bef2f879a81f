"""Geocoding providers."""

from .base import Geocoder
from .mock import MockGeocoder
from .nominatim import NominatimGeocoder

__all__ = ["Geocoder", "MockGeocoder", "NominatimGeocoder"]
