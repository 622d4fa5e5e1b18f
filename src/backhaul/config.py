"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAPBOX_TOKEN_PLACEHOLDER = "your_mapbox_public_token"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BACKHAUL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Backhaul Finder API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    loads_file: Path = Field(
        default=Path("data/backhaul_loads.json"),
        description="JSON list of candidate load records served by the load repository.",
    )

    # Geocoding provider (Mapbox)
    mapbox_token: Optional[str] = Field(
        default=None,
        description="Mapbox access token. Leave unset to geocode from the static fallback tables only.",
    )
    mapbox_geocoding_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    geocoding_proximity: tuple[float, float] = Field(
        default=(-80.8431, 35.2271),
        description="(lng, lat) used to bias geocoding results toward the home region.",
    )
    geocoding_country: str = "US"

    # Routing provider (PC*Miler)
    pcmiler_api_key: Optional[str] = Field(default=None, description="PC*Miler REST API key.")
    pcmiler_base_url: str = "https://pcmiler.alk.com/apis/rest/v1.0/Service.svc"

    http_timeout_seconds: float = Field(default=15.0, gt=0.0)
    corridor_cache_ttl_seconds: float = Field(default=3600.0, gt=0.0)
    default_corridor_width_miles: float = Field(default=50.0, gt=0.0)
    default_home_radius_miles: float = Field(default=50.0, ge=0.0)
    max_route_home_candidates: int = Field(default=50, ge=1)
    route_home_batch_size: int = Field(default=5, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @property
    def geocoding_configured(self) -> bool:
        return bool(self.mapbox_token) and self.mapbox_token != MAPBOX_TOKEN_PLACEHOLDER

    @field_validator("data_root", "loads_file", mode="before")
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

    @field_validator("geocoding_proximity", mode="before")
    @classmethod
    def _parse_proximity(cls, value: Any) -> tuple[float, float]:
        """Accept "lng,lat" strings as well as JSON arrays for the proximity bias."""
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except (json.JSONDecodeError, TypeError):
                parsed = [item.strip() for item in value.split(",") if item.strip()]
            value = parsed
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return (float(value[0]), float(value[1]))
        raise ValueError("geocoding_proximity must be a 'lng,lat' pair.")


settings = Settings()
