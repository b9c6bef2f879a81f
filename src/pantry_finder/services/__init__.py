"""Service layer for location search."""
