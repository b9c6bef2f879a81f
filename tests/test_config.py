from pathlib import Path

from pantry_finder.config import Settings


def test_defaults():
    config = Settings(_env_file=None)

    assert config.api_prefix == "/api"
    assert config.default_coordinate_radius_miles == 25
    assert config.default_address_radius_miles == 15
    assert config.nearby_fallback_radius_miles == 50
    assert config.has_more_threshold == 20
    assert config.locations_file.is_absolute()


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("PANTRY_LOCATIONS_FILE", str(tmp_path / "seed.csv"))
    monkeypatch.setenv("PANTRY_FRONTEND_ALLOWED_ORIGINS", '["https://pantry.example", "http://localhost:5173"]')
    monkeypatch.setenv("PANTRY_GEOCODER_BASE_URL", "https://nominatim.example")

    config = Settings(_env_file=None)

    assert config.locations_file == (tmp_path / "seed.csv").resolve()
    assert config.frontend_allowed_origins == ("https://pantry.example", "http://localhost:5173")
    assert config.geocoder_base_url == "https://nominatim.example"


def test_supabase_configured_requires_url_and_key():
    assert Settings(_env_file=None, supabase_url="https://x.supabase.co").supabase_configured is False
    assert Settings(_env_file=None, supabase_url="https://x.supabase.co", supabase_key="secret").supabase_configured
