"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDOPS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Field Operations API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for exports and run outputs.")

    # Batch operations
    max_concurrent_batch: int = Field(default=5, ge=1, description="Work orders updated concurrently per chunk.")
    inter_batch_delay_ms: int = Field(default=100, ge=0, description="Pause between chunks to spare the record store.")
    feedback_enabled: bool = Field(default=True, description="Emit feedback events to the notifier.")

    # Selection
    max_selections: int = Field(default=50, ge=1)
    selection_grace_ms: int = Field(default=1000, ge=0)

    # Distance and routing
    average_speed_kmh: float = Field(default=40.0, gt=0.0, description="Average urban driving speed.")
    nearby_radius_km: float = Field(default=10.0, gt=0.0)
    proximity_batch_size: int = Field(default=50, ge=1)
    sort_cache_ttl_ms: int = Field(default=60000, ge=0)
    sort_cache_max_entries: int = Field(default=10, ge=1)
    route_priority_multipliers: dict[str, float] = Field(
        default={"high": 0.7, "medium": 1.0, "low": 1.3},
        description="Edge cost multipliers used by the nearest-neighbour route builder.",
    )
    proximity_priority_weights: dict[str, int] = Field(
        default={"high": 1, "medium": 2, "low": 3},
        description="Priority weights for proximity scoring (lower ranks first).",
    )
    proximity_distance_tiers_km: tuple[float, ...] = Field(
        default=(5.0, 10.0, 25.0),
        description="Upper bounds of the distance tiers; tier n gets multiplier n + 1.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
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
    work_orders_table: str = "work_orders"

    @field_validator("data_root", mode="before")
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

    @field_validator("proximity_distance_tiers_km", mode="before")
    @classmethod
    def _parse_float_tuple_from_env(cls, value: Any) -> tuple[float, ...]:
        """Parse float tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return tuple(float(item) for item in value)
        if isinstance(value, list):
            return tuple(float(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(float(item) for item in parsed)
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            if "," in value:
                return tuple(float(item.strip()) for item in value.split(",") if item.strip())
            if value.strip():
                return (float(value.strip()),)
        return tuple()

    @field_validator("route_priority_multipliers", "proximity_priority_weights", mode="after")
    @classmethod
    def _lowercase_priority_keys(cls, value: dict) -> dict:
        return {str(key).lower(): item for key, item in value.items()}


settings = Settings()
