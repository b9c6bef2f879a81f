"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PANTRY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Pantry Finder API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    locations_file: Path = Field(
        default=Path("data/locations.csv"),
        description="Seed dataset for the in-memory location store.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    supabase_locations_table: str = Field(default="locations")

    # Geocoding provider
    geocoder_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of a Nominatim-compatible geocoder. The deterministic mock is used when unset.",
    )
    geocoder_user_agent: str = Field(default="pantry-finder/0.1")
    geocoder_country_codes: str = Field(default="us")
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_max_retries: int = Field(default=2, ge=0)
    geocoder_backoff_seconds: float = Field(default=0.5, ge=0.0)

    # Search defaults (miles)
    default_coordinate_radius_miles: float = Field(default=25.0, gt=0.0)
    default_address_radius_miles: float = Field(default=15.0, gt=0.0)
    nearby_fallback_radius_miles: float = Field(default=50.0, gt=0.0)
    default_center_latitude: float = Field(default=44.9429, ge=-90.0, le=90.0)
    default_center_longitude: float = Field(default=-123.0307, ge=-180.0, le=180.0)
    has_more_threshold: int = Field(default=20, ge=1)
    geolocation_timeout_seconds: float = Field(default=10.0, gt=0.0)

    @field_validator("data_root", "locations_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


settings = Settings()
