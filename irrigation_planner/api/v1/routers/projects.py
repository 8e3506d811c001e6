"""
API router for project statistics endpoints.
"""
from typing import List

from fastapi import APIRouter, Request

from irrigation_planner.api.dependencies import ProjectServiceDep
from irrigation_planner.api.rate_limit import RATE_LIMIT, RATE_LIMIT_RESPONSE, limiter
from irrigation_planner.domain.models import ProjectData
from irrigation_planner.domain.statistics import (
    BranchPipeReport,
    MainPipeDetailedStats,
    ProjectSummaryStats,
    ZoneDetailedStats,
)


router = APIRouter(
    prefix="/projects",
    tags=["projects"],
)


@router.post(
    "/zone-stats",
    response_model=List[ZoneDetailedStats],
    summary="Per-zone statistics",
    description="""
    Compute plant, water and pipe statistics for every zone of a project.

    When `useZones` is false, or no zones are declared, the whole project is
    reported as one implicit zone with id `main-area`. Plants are assigned to
    zones by position; branch pipes follow the zone of their sub-main.
    """,
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def get_zone_stats(
    request: Request,
    project: ProjectData,
    project_service: ProjectServiceDep,
) -> List[ZoneDetailedStats]:
    return project_service.get_zone_stats(project)


@router.post(
    "/main-pipe-stats",
    response_model=MainPipeDetailedStats,
    summary="Main pipe statistics",
    description="Longest, shortest and average main pipe with the name of the zone each one feeds.",
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def get_main_pipe_stats(
    request: Request,
    project: ProjectData,
    project_service: ProjectServiceDep,
) -> MainPipeDetailedStats:
    return project_service.get_main_pipe_stats(project)


@router.post(
    "/summary",
    response_model=ProjectSummaryStats,
    summary="Project summary",
    description="""
    Whole-project rollup of zone and pipe statistics.

    Includes area and water totals, pipe totals per tier, heuristic
    efficiency/balance/optimization scores, a linear cost estimate, the
    maintenance complexity tier and, when a sprinkler config is stored, the
    total sprinkler flow.
    """,
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def get_project_summary(
    request: Request,
    project: ProjectData,
    project_service: ProjectServiceDep,
) -> ProjectSummaryStats:
    """
    Compute the project summary.

    Args:
        request: Incoming request (used by the rate limiter)
        project: Project snapshot
        project_service: Project service (injected dependency)

    Returns:
        ProjectSummaryStats
    """
    return project_service.get_project_summary(project)


@router.post(
    "/branch-pipe-report",
    response_model=BranchPipeReport,
    summary="Branch pipe report",
    description="The longest branch pipe with the plants it serves, and branch totals per sub-main.",
    responses=RATE_LIMIT_RESPONSE,
)
@limiter.limit(RATE_LIMIT)
async def get_branch_pipe_report(
    request: Request,
    project: ProjectData,
    project_service: ProjectServiceDep,
) -> BranchPipeReport:
    return project_service.get_branch_pipe_report(project)
