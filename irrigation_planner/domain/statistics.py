"""
Statistics objects produced by the aggregation and summary services.

Plain data, JSON-serializable, no behavior.
"""
from typing import List, Optional

from pydantic import Field

from irrigation_planner.domain.models import IrrigationModel, PlantSpec


class PipeLengthStats(IrrigationModel):
    """Length statistics of one pipe tier."""
    longest: float = 0.0
    shortest: float = 0.0
    average: float = 0.0
    total: float = 0.0
    count: int = 0


class ZoneDetailedStats(IrrigationModel):
    """Per-zone plant, water and pipe statistics."""
    zone_id: str
    zone_name: str
    zone_area: float = Field(description="Declared zone area (m²)")
    area_in_rai: float
    exclusion_area: float = Field(description="Area of exclusion polygons attributed to the zone (m²)")
    effective_area: float = Field(description="Zone area minus attributed exclusions (m²)")
    plant_count: int
    plant_data: Optional[PlantSpec] = None
    total_zone_water_need: float = Field(description="Sum of per-plant water need (liters/session)")
    water_per_plant: float
    main_pipes: PipeLengthStats
    sub_main_pipes: PipeLengthStats
    branch_pipes: PipeLengthStats
    plant_density_per_square_meter: float
    water_efficiency: float = Field(description="Liters per session per m² of effective area")
    coverage_percentage: float


class MainPipeDetail(IrrigationModel):
    """A main pipe with its resolved destination."""
    id: str
    length: float
    diameter: float
    to_zone: str
    destination_zone_name: str


class MainPipeDetailedStats(IrrigationModel):
    """Main pipe statistics across the project."""
    count: int = 0
    longest: Optional[MainPipeDetail] = None
    shortest: Optional[MainPipeDetail] = None
    average_length: float = 0.0
    total_length: float = 0.0
    pipes: List[MainPipeDetail] = Field(default_factory=list)


class LongestBranchPipe(IrrigationModel):
    """The longest branch pipe and the plants it serves."""
    id: str
    length: float
    plant_count: int
    plant_names: List[str] = Field(default_factory=list)


class SubMainBranchSummary(IrrigationModel):
    """Branch pipes fed by one sub-main."""
    id: str
    zone_id: str
    length: float
    branch_count: int
    total_branch_length: float


class BranchPipeReport(IrrigationModel):
    """Branch pipe details for the results page."""
    longest_branch_pipe: Optional[LongestBranchPipe] = None
    sub_main_pipes: List[SubMainBranchSummary] = Field(default_factory=list)


class CostEstimate(IrrigationModel):
    """Linear cost estimate from pipe lengths and plant count."""
    main_pipe_cost: float = 0.0
    sub_main_pipe_cost: float = 0.0
    branch_pipe_cost: float = 0.0
    plant_cost: float = 0.0
    total_cost: float = 0.0


class SprinklerFlowSummary(IrrigationModel):
    """Flow rates implied by the sprinkler config for every plant."""
    plant_count: int
    flow_rate_per_plant: float
    total_flow_rate_per_minute: float
    total_flow_rate_per_hour: float
    daily_water_usage: float
    pressure_bar: float
    radius_meters: float
    coverage_per_sprinkler: float


class ProjectSummaryStats(IrrigationModel):
    """Whole-project rollup of zone and pipe statistics."""
    project_name: str = ""
    total_area: float
    total_area_in_rai: float
    exclusion_area: float
    effective_area: float
    usable_area_percentage: float
    number_of_zones: int
    total_plants: int
    total_water_need: float
    average_water_per_plant: float
    main_pipes: PipeLengthStats
    sub_main_pipes: PipeLengthStats
    branch_pipes: PipeLengthStats
    total_pipe_length: float
    total_pipe_sections: int
    longest_pipes_combined: float
    main_pipe_efficiency: float
    system_efficiency: float
    water_distribution_balance: float
    pipe_optimization: float
    cost_estimate: CostEstimate
    maintenance_complexity: str
    sprinkler_flow: Optional[SprinklerFlowSummary] = None
    main_pipe_stats: MainPipeDetailedStats
    zones: List[ZoneDetailedStats] = Field(default_factory=list)
