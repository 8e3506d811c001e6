"""
API response models using Pydantic.
"""
from pydantic import BaseModel, Field

from irrigation_planner.domain.models import CurvedPath


class CurvePipeResponse(CurvedPath):
    """Curved pipe path with its length."""
    length: float = Field(
        description="Haversine length of the path in meters",
        examples=[87.4]
    )


class ErrorResponse(BaseModel):
    """Error body returned by the error middleware."""
    error: str = Field(
        description="Error category",
        examples=["Plant catalog error"]
    )
    detail: str = Field(
        description="Human-readable error detail"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Plant catalog error",
                "detail": "Catalog API request error: connection refused",
            }
        }
