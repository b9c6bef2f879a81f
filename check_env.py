#!/usr/bin/env python3
"""Print the effective Pantry Finder configuration and write a template .env when none exists."""

import sys
from pathlib import Path

ENV_TEMPLATE = """# Supabase (optional; the CSV seed file is used when unset)
PANTRY_SUPABASE_URL=https://your-project-id.supabase.co
PANTRY_SUPABASE_KEY=your-service-role-key-here
PANTRY_SUPABASE_LOCATIONS_TABLE=locations

# API
PANTRY_API_PREFIX=/api
# JSON array format: ["http://localhost:5173","http://127.0.0.1:5173"]
# PANTRY_FRONTEND_ALLOWED_ORIGINS=

# Data
PANTRY_LOCATIONS_FILE=./data/locations.csv

# Geocoding (optional; a deterministic offline geocoder is used when unset)
# PANTRY_GEOCODER_BASE_URL=https://nominatim.openstreetmap.org
"""


def _mask(value: str | None, keep: int = 12) -> str:
    if not value:
        return "<not set>"
    return value if len(value) <= keep else f"{value[:keep]}..."


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    if not env_file.exists():
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env at {env_file}; edit it and re-run.")
        return 1

    sys.path.insert(0, str(project_root / "src"))
    from pantry_finder.config import Settings

    try:
        config = Settings()
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    print(f"Supabase URL:      {_mask(config.supabase_url, 30)}")
    print(f"Supabase key:      {_mask(config.supabase_key)}")
    print(f"Locations table:   {config.supabase_locations_table}")
    print(f"Locations file:    {config.locations_file} ({'found' if config.locations_file.exists() else 'missing'})")
    print(f"Geocoder:          {config.geocoder_base_url or 'offline mock'}")
    print(f"Allowed origins:   {', '.join(config.frontend_allowed_origins) or '<none>'}")

    if config.supabase_configured:
        print("Store backend: supabase")
    elif config.locations_file.exists():
        print("Store backend: in-memory CSV")
    else:
        print("Store backend: empty in-memory store (no Supabase credentials and no locations file)")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
