"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FOODSHARE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "FoodShare Dispatch API"
    api_prefix: str = "/api"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Courier origin used when the client cannot report a location (Nairobi)
    default_origin_latitude: float = Field(default=-1.2921, ge=-90.0, le=90.0)
    default_origin_longitude: float = Field(default=36.8219, ge=-180.0, le=180.0)

    # Route time heuristic: transit minutes per km plus dwell minutes per stop
    minutes_per_km: float = Field(default=3.0, ge=0.0)
    minutes_per_stop: float = Field(default=5.0, ge=0.0)

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    # E-mail notifications (Resend)
    resend_api_key: Optional[str] = Field(default=None, description="Resend API key used for status e-mails.")
    resend_api_url: str = "https://api.resend.com/emails"
    notification_sender: str = "FoodShare <onboarding@resend.dev>"
    notification_timeout_seconds: float = Field(default=10.0, gt=0.0)
    notification_workers: int = Field(default=2, ge=1)

    # Geocoding (Mapbox)
    mapbox_token: Optional[str] = Field(default=None, description="Mapbox public token for geocoding.")
    mapbox_geocoding_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    geocode_limit: int = Field(default=5, ge=1, le=10)

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
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


settings = Settings()
