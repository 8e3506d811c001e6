"""
Sprinkler flow calculations.
"""
import math

from irrigation_planner.config import settings
from irrigation_planner.domain.models import SprinklerConfig
from irrigation_planner.domain.statistics import SprinklerFlowSummary

DEFAULT_HOURS_PER_DAY = 2.0


def default_sprinkler_config() -> SprinklerConfig:
    """Sprinkler config built from the configured defaults."""
    return SprinklerConfig(
        flow_rate_per_minute=settings.sprinkler_flow_rate_per_minute,
        pressure_bar=settings.sprinkler_pressure_bar,
        radius_meters=settings.sprinkler_radius_meters,
    )


def calculate_total_flow_rate(plant_count: int, flow_rate_per_minute: float) -> float:
    """
    Total flow when every plant has one sprinkler.

    Args:
        plant_count: Number of plants
        flow_rate_per_minute: Flow per sprinkler (liters/minute)

    Returns:
        Total flow in liters/minute, 0 for non-positive input
    """
    if plant_count <= 0 or flow_rate_per_minute <= 0:
        return 0.0
    return plant_count * flow_rate_per_minute


def calculate_hourly_flow_rate(flow_rate_per_minute: float) -> float:
    return flow_rate_per_minute * 60


def calculate_daily_water_usage(flow_rate_per_minute: float, hours_per_day: float = DEFAULT_HOURS_PER_DAY) -> float:
    """Liters per day for a flow running hours_per_day hours."""
    return flow_rate_per_minute * 60 * hours_per_day


def calculate_sprinkler_coverage(radius_meters: float) -> float:
    """Area wetted by one sprinkler in m²."""
    if radius_meters <= 0:
        return 0.0
    return math.pi * radius_meters ** 2


def summarize_sprinkler_flow(config: SprinklerConfig, plant_count: int) -> SprinklerFlowSummary:
    """
    Flow figures for a project with one sprinkler per plant.

    Args:
        config: Sprinkler settings
        plant_count: Number of plants

    Returns:
        SprinklerFlowSummary
    """
    total_flow = calculate_total_flow_rate(plant_count, config.flow_rate_per_minute)
    return SprinklerFlowSummary(
        plant_count=plant_count,
        flow_rate_per_plant=config.flow_rate_per_minute,
        total_flow_rate_per_minute=total_flow,
        total_flow_rate_per_hour=calculate_hourly_flow_rate(total_flow),
        daily_water_usage=calculate_daily_water_usage(total_flow),
        pressure_bar=config.pressure_bar,
        radius_meters=config.radius_meters,
        coverage_per_sprinkler=calculate_sprinkler_coverage(config.radius_meters),
    )
