"""
API request models using Pydantic.
"""
from typing import Dict, List

from pydantic import Field

from irrigation_planner.domain.models import Coordinate, IrrigationModel


class CurvePipeRequest(IrrigationModel):
    """Anchor points and radius controls of a drawn pipe."""
    anchor_points: List[Coordinate] = Field(
        description="Points placed by the user, in drawing order"
    )
    radius_controls: Dict[int, float] = Field(
        default_factory=dict,
        description="Curve radius in meters keyed by segment index (segment i joins anchor i and i + 1)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "anchorPoints": [
                    {"lat": 13.7563, "lng": 100.5018},
                    {"lat": 13.7568, "lng": 100.5018},
                    {"lat": 13.7568, "lng": 100.5024},
                ],
                "radiusControls": {"0": 10.0},
            }
        }


class SprinklerConfigUpdate(IrrigationModel):
    """New sprinkler settings."""
    flow_rate_per_minute: float = Field(
        gt=0, le=1000,
        description="Flow per sprinkler (liters/minute)",
        examples=[2.5]
    )
    pressure_bar: float = Field(
        gt=0, le=50,
        description="Operating pressure (bar)",
        examples=[2.0]
    )
    radius_meters: float = Field(
        gt=0, le=100,
        description="Throw radius (m)",
        examples=[1.5]
    )
