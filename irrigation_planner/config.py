"""
Application configuration using Pydantic settings.
"""
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Plant catalog API Configuration
    catalog_api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the back end serving the plant type catalog"
    )
    catalog_api_token: str = Field(
        default="",
        description="Bearer token for the plant catalog API"
    )

    # Retry Configuration
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of retry attempts for catalog API calls"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=1,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Pipe Curving Parameters
    curve_collinear_tolerance: float = Field(
        default=0.05,
        description="Corners within this many radians of 0 or pi are left straight"
    )
    curve_straight_segments: int = Field(
        default=50,
        description="Number of segments a two-anchor pipe is sampled into"
    )
    curve_min_arc_segments: int = Field(
        default=8,
        description="Minimum number of segments used to sample a corner arc"
    )
    curve_arc_segments_per_radian: float = Field(
        default=20.0,
        description="Arc segments per radian of corner angle"
    )

    # Project Summary Parameters
    main_pipe_cost_per_meter: float = Field(
        default=120.0,
        description="Unit cost of main pipe per meter"
    )
    sub_main_pipe_cost_per_meter: float = Field(
        default=80.0,
        description="Unit cost of sub-main pipe per meter"
    )
    branch_pipe_cost_per_meter: float = Field(
        default=25.0,
        description="Unit cost of branch pipe per meter"
    )
    plant_unit_cost: float = Field(
        default=15.0,
        description="Sprinkler and fitting cost per plant"
    )
    maintenance_medium_threshold: int = Field(
        default=50,
        description="Pipe section count above which maintenance is 'medium'"
    )
    maintenance_high_threshold: int = Field(
        default=100,
        description="Pipe section count above which maintenance is 'high'"
    )

    # Sprinkler Defaults
    sprinkler_flow_rate_per_minute: float = Field(
        default=2.5,
        description="Default sprinkler flow rate per plant (liters/minute)"
    )
    sprinkler_pressure_bar: float = Field(
        default=2.0,
        description="Default sprinkler pressure (bar)"
    )
    sprinkler_radius_meters: float = Field(
        default=1.5,
        description="Default sprinkler throw radius (meters)"
    )
    sprinkler_config_path: Optional[str] = Field(
        default=None,
        description="JSON file backing the sprinkler config; in-memory when unset"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Horticulture Irrigation Planner",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
