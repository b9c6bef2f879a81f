"""Supabase client construction for the location store."""

import logging

from supabase import Client, create_client

from ..config import Settings


def create_supabase_client(config: Settings) -> Client | None:
    """Create a Supabase client from settings.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not config.supabase_configured:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(config.supabase_url, config.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None
