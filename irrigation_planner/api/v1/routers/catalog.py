"""
API router for the plant type catalog.
"""
from typing import Annotated, List

from fastapi import APIRouter, Path, Request

from irrigation_planner.api.dependencies import CatalogClientDep
from irrigation_planner.api.rate_limit import RATE_LIMIT, RATE_LIMIT_RESPONSE, limiter
from irrigation_planner.api.v1.models.responses import ErrorResponse
from irrigation_planner.infrastructure.catalog_client import PlantType


router = APIRouter(
    prefix="/plant-types",
    tags=["catalog"],
)

CATALOG_ERROR_RESPONSES = {
    502: {
        "model": ErrorResponse,
        "description": "The plant catalog failed after retries",
    },
    503: {
        "model": ErrorResponse,
        "description": "The plant catalog could not be reached",
    },
    **RATE_LIMIT_RESPONSE,
}


@router.get(
    "",
    response_model=List[PlantType],
    summary="List plant types",
    description="Plant types from the catalog back end, used to pick a zone's plant and its water need.",
    responses=CATALOG_ERROR_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def list_plant_types(
    request: Request,
    catalog_client: CatalogClientDep,
) -> List[PlantType]:
    # Catalog errors are mapped by the error middleware
    return await catalog_client.get_plant_types()


@router.get(
    "/{plant_type_id}",
    response_model=PlantType,
    summary="Get a plant type",
    responses={
        404: {
            "model": ErrorResponse,
            "description": "Unknown plant type",
        },
        **CATALOG_ERROR_RESPONSES,
    },
)
@limiter.limit(RATE_LIMIT)
async def get_plant_type(
    request: Request,
    plant_type_id: Annotated[str, Path(description="Catalog id of the plant type")],
    catalog_client: CatalogClientDep,
) -> PlantType:
    return await catalog_client.get_plant_type(plant_type_id)
