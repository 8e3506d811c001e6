"""
API router for the sprinkler configuration.
"""
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, status

from irrigation_planner.api.dependencies import SprinklerServiceDep
from irrigation_planner.api.rate_limit import RATE_LIMIT, RATE_LIMIT_RESPONSE, limiter
from irrigation_planner.api.v1.models.requests import SprinklerConfigUpdate
from irrigation_planner.domain.models import SprinklerConfig
from irrigation_planner.domain.statistics import SprinklerFlowSummary


router = APIRouter(
    prefix="/sprinkler-config",
    tags=["sprinkler"],
)


@router.get(
    "",
    response_model=SprinklerConfig,
    summary="Get the sprinkler config",
    responses={
        404: {
            "description": "No sprinkler config has been saved",
        },
        **RATE_LIMIT_RESPONSE,
    },
)
@limiter.limit(RATE_LIMIT)
async def get_sprinkler_config(
    request: Request,
    sprinkler_service: SprinklerServiceDep,
) -> SprinklerConfig:
    config = sprinkler_service.get_config()
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No sprinkler config has been saved"
        )
    return config


@router.put(
    "",
    response_model=SprinklerConfig,
    summary="Save the sprinkler config",
    description="""
    Store the sprinkler settings used by the project summary.

    Limits: `0 < flowRatePerMinute <= 1000`, `0 < pressureBar <= 50`,
    `0 < radiusMeters <= 100`.
    """,
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def put_sprinkler_config(
    request: Request,
    update: SprinklerConfigUpdate,
    sprinkler_service: SprinklerServiceDep,
) -> SprinklerConfig:
    return sprinkler_service.update_config(
        flow_rate_per_minute=update.flow_rate_per_minute,
        pressure_bar=update.pressure_bar,
        radius_meters=update.radius_meters,
    )


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the sprinkler config",
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def delete_sprinkler_config(
    request: Request,
    sprinkler_service: SprinklerServiceDep,
) -> None:
    sprinkler_service.reset_config()


@router.get(
    "/defaults",
    response_model=SprinklerConfig,
    summary="Default sprinkler settings",
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def get_sprinkler_defaults(
    request: Request,
    sprinkler_service: SprinklerServiceDep,
) -> SprinklerConfig:
    return sprinkler_service.get_defaults()


@router.get(
    "/flow",
    response_model=SprinklerFlowSummary,
    summary="Sprinkler flow for a plant count",
    description="Total flow per minute, per hour and per day with one sprinkler per plant. "
                "Uses the default settings when no config is stored.",
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def get_sprinkler_flow(
    request: Request,
    plant_count: Annotated[int, Query(alias="plantCount", ge=0, description="Number of plants")],
    sprinkler_service: SprinklerServiceDep,
) -> SprinklerFlowSummary:
    return sprinkler_service.get_flow_summary(plant_count)
