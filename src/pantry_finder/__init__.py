"""Food-assistance location search service."""
