"""
API router for pipe drawing endpoints.
"""
from fastapi import APIRouter, Request

from irrigation_planner.api.dependencies import ProjectServiceDep
from irrigation_planner.api.rate_limit import RATE_LIMIT, RATE_LIMIT_RESPONSE, limiter
from irrigation_planner.api.v1.models.requests import CurvePipeRequest
from irrigation_planner.api.v1.models.responses import CurvePipeResponse


router = APIRouter(
    prefix="/pipes",
    tags=["pipes"],
)


@router.post(
    "/curve",
    response_model=CurvePipeResponse,
    summary="Curve a drawn pipe",
    description="""
    Smooth a pipe path by rounding its corners.

    Each interior anchor takes the larger radius of its two adjacent segments
    and is replaced by a circular arc tangent to both. Corners that cannot be
    rounded (nearly straight, too tight for the segment lengths, or without a
    radius) stay as straight vertices and are listed in `straightCorners`.
    A two-anchor pipe with a radius on segment 0 gets a single symmetric bend,
    which approximates an arc.

    The path always starts and ends exactly at the first and last anchors.
    """,
    responses={
        200: {
            "description": "Curved path",
        },
        **RATE_LIMIT_RESPONSE,
    },
)
@limiter.limit(RATE_LIMIT)
async def curve_pipe(
    request: Request,
    body: CurvePipeRequest,
    project_service: ProjectServiceDep,
) -> CurvePipeResponse:
    """
    Build the curved path of a pipe.

    Args:
        request: Incoming request (used by the rate limiter)
        body: Anchor points and radius controls
        project_service: Project service (injected dependency)

    Returns:
        CurvePipeResponse with the path, guides and length
    """
    curved, length = project_service.curve_pipe(body.anchor_points, body.radius_controls)
    return CurvePipeResponse(
        path=curved.path,
        guides=curved.guides,
        rounded_corners=curved.rounded_corners,
        straight_corners=curved.straight_corners,
        length=length,
    )
