"""
Dependency injection for FastAPI.
"""
from typing import Annotated, Optional

from fastapi import Depends

from irrigation_planner.config import settings
from irrigation_planner.infrastructure.catalog_client import (
    PlantCatalogClient,
    get_catalog_client,
)
from irrigation_planner.infrastructure.sprinkler_store import (
    InMemorySprinklerConfigStore,
    JsonFileSprinklerConfigStore,
    SprinklerConfigStore,
)
from irrigation_planner.services.application.project_service import ProjectService
from irrigation_planner.services.application.sprinkler_service import SprinklerService
from irrigation_planner.services.domain.pipe_curving import CurveConfig
from irrigation_planner.services.domain.project_summary import (
    ProjectSummaryCalculator,
    SummaryConfig,
)
from irrigation_planner.services.domain.zone_aggregator import ZoneAggregator

# Singleton store, shared across requests
_sprinkler_store: Optional[SprinklerConfigStore] = None


def get_sprinkler_store() -> SprinklerConfigStore:
    """
    Get or create the sprinkler config store.

    Returns:
        JSON file store when a path is configured, in-memory store otherwise
    """
    global _sprinkler_store
    if _sprinkler_store is None:
        if settings.sprinkler_config_path:
            _sprinkler_store = JsonFileSprinklerConfigStore(settings.sprinkler_config_path)
        else:
            _sprinkler_store = InMemorySprinklerConfigStore()
    return _sprinkler_store


def get_zone_aggregator() -> ZoneAggregator:
    return ZoneAggregator()


def get_summary_calculator(
    zone_aggregator: Annotated[ZoneAggregator, Depends(get_zone_aggregator)],
    store: Annotated[SprinklerConfigStore, Depends(get_sprinkler_store)],
) -> ProjectSummaryCalculator:
    """
    Dependency factory for ProjectSummaryCalculator.

    Args:
        zone_aggregator: Zone statistics service (injected)
        store: Sprinkler config store (injected)

    Returns:
        ProjectSummaryCalculator instance
    """
    return ProjectSummaryCalculator(
        config=SummaryConfig.from_settings(),
        zone_aggregator=zone_aggregator,
        sprinkler_store=store,
    )


def get_project_service(
    zone_aggregator: Annotated[ZoneAggregator, Depends(get_zone_aggregator)],
    summary_calculator: Annotated[ProjectSummaryCalculator, Depends(get_summary_calculator)],
) -> ProjectService:
    """
    Dependency factory for ProjectService.

    Args:
        zone_aggregator: Zone statistics service (injected)
        summary_calculator: Project rollup service (injected)

    Returns:
        ProjectService instance
    """
    return ProjectService(
        zone_aggregator=zone_aggregator,
        summary_calculator=summary_calculator,
        curve_config=CurveConfig.from_settings(),
    )


def get_sprinkler_service(
    store: Annotated[SprinklerConfigStore, Depends(get_sprinkler_store)],
) -> SprinklerService:
    return SprinklerService(store=store)


# Type aliases for cleaner route signatures
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
SprinklerServiceDep = Annotated[SprinklerService, Depends(get_sprinkler_service)]
CatalogClientDep = Annotated[PlantCatalogClient, Depends(get_catalog_client)]
