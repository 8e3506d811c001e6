"""
Domain models for irrigation projects.

These models represent the project document drawn by the planner UI: zones,
plants, the three pipe tiers and exclusion areas. They are independent of any
infrastructure concerns (HTTP, storage). JSON uses the camelCase keys of the
front end; Python code uses snake_case field names.
"""
import math
from typing import List, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class IrrigationModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Coordinate(IrrigationModel):
    """A WGS84 position. Immutable value type."""
    lat: float
    lng: float

    class Config:
        frozen = True

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lng)


class PlantSpec(IrrigationModel):
    """Plant type attached to a zone or to a single plant."""
    id: Union[int, str]
    name: str
    plant_spacing: float = Field(default=0.0, description="Spacing between plants in a row (m)")
    row_spacing: float = Field(default=0.0, description="Spacing between rows (m)")
    water_need: float = Field(default=0.0, description="Water need per plant (liters/session)")


class PlantInstance(IrrigationModel):
    """A placed plant. Zone membership is derived from its position."""
    id: str
    position: Coordinate
    plant_data: PlantSpec
    zone_id: Optional[str] = None


class Zone(IrrigationModel):
    """User-drawn zone polygon with one plant type."""
    id: str
    name: str
    coordinates: List[Coordinate] = Field(default_factory=list)
    area: float = Field(default=0.0, description="Zone area in m²")
    plant_data: Optional[PlantSpec] = None


class BranchPipe(IrrigationModel):
    """Terminal pipe delivering water to plants. Owned by a sub-main."""
    id: str
    sub_main_pipe_id: Optional[str] = None
    coordinates: List[Coordinate] = Field(default_factory=list)
    length: float = Field(default=0.0, description="Stored pipe length (m)")
    diameter: float = Field(default=0.0, description="Pipe diameter (mm)")
    plants: List[PlantInstance] = Field(default_factory=list)


class SubMainPipe(IrrigationModel):
    """Pipe run within a zone feeding branch pipes."""
    id: str
    zone_id: str = ""
    coordinates: List[Coordinate] = Field(default_factory=list)
    length: float = Field(default=0.0, description="Stored pipe length (m)")
    diameter: float = Field(default=0.0, description="Pipe diameter (mm)")
    branch_pipes: List[BranchPipe] = Field(default_factory=list)


class MainPipe(IrrigationModel):
    """Pipe run from the pump to a zone."""
    id: str
    from_pump: str = ""
    to_zone: str = ""
    coordinates: List[Coordinate] = Field(default_factory=list)
    length: float = Field(default=0.0, description="Stored pipe length (m)")
    diameter: float = Field(default=0.0, description="Pipe diameter (mm)")


class ExclusionArea(IrrigationModel):
    """Polygon subtracted from the usable area (building, road, river...)."""
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    coordinates: List[Coordinate] = Field(default_factory=list)


class Pump(IrrigationModel):
    """Water source of the project."""
    id: Optional[str] = None
    position: Optional[Coordinate] = None
    capacity: float = Field(default=0.0, description="Pump capacity (liters/minute)")
    head: Optional[float] = None


class ProjectData(IrrigationModel):
    """Snapshot of a horticulture irrigation project."""
    project_name: str = ""
    version: Optional[str] = None
    updated_at: Optional[str] = None
    total_area: float = Field(default=0.0, description="Project area in m²")
    use_zones: bool = False
    zones: List[Zone] = Field(default_factory=list)
    plants: List[PlantInstance] = Field(default_factory=list)
    main_pipes: List[MainPipe] = Field(default_factory=list)
    sub_main_pipes: List[SubMainPipe] = Field(default_factory=list)
    exclusion_areas: List[ExclusionArea] = Field(default_factory=list)
    pump: Optional[Pump] = None


class GuideData(IrrigationModel):
    """Construction of one rounded corner, for the map overlay only."""
    center: Coordinate
    radius: float = Field(description="Arc radius (m)")
    tangent1: Coordinate
    tangent2: Coordinate
    radius_line1: List[Coordinate]
    radius_line2: List[Coordinate]


class CurvedPath(IrrigationModel):
    """Smoothed pipe path produced from anchor points."""
    path: List[Coordinate] = Field(default_factory=list)
    guides: List[GuideData] = Field(default_factory=list)
    rounded_corners: List[int] = Field(
        default_factory=list,
        description="Anchor indices whose corner was replaced by an arc"
    )
    straight_corners: List[int] = Field(
        default_factory=list,
        description="Anchor indices that fell back to a straight vertex"
    )


class SprinklerConfig(IrrigationModel):
    """Sprinkler head settings shared by every plant of the project."""
    flow_rate_per_minute: float = Field(gt=0, le=1000, description="Flow per sprinkler (liters/minute)")
    pressure_bar: float = Field(gt=0, le=50, description="Operating pressure (bar)")
    radius_meters: float = Field(gt=0, le=100, description="Throw radius (m)")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
