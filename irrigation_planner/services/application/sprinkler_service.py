"""
Application service: Sprinkler configuration management.
"""
import logging
from typing import Optional

from irrigation_planner.domain.models import SprinklerConfig
from irrigation_planner.domain.statistics import SprinklerFlowSummary
from irrigation_planner.infrastructure.sprinkler_store import SprinklerConfigStore
from irrigation_planner.services.domain.sprinkler import (
    default_sprinkler_config,
    summarize_sprinkler_flow,
)

logger = logging.getLogger(__name__)


class SprinklerService:
    """Reads and updates the sprinkler config through the injected store."""

    def __init__(self, store: SprinklerConfigStore):
        self.store = store

    def get_config(self) -> Optional[SprinklerConfig]:
        return self.store.load()

    def get_defaults(self) -> SprinklerConfig:
        return default_sprinkler_config()

    def update_config(self, flow_rate_per_minute: float, pressure_bar: float, radius_meters: float) -> SprinklerConfig:
        """
        Validate and store a new sprinkler config.

        Raises:
            pydantic.ValidationError: If a value is out of range
        """
        config = SprinklerConfig(
            flow_rate_per_minute=flow_rate_per_minute,
            pressure_bar=pressure_bar,
            radius_meters=radius_meters,
        )
        saved = self.store.save(config)
        logger.info(
            f"Sprinkler config updated: {saved.flow_rate_per_minute} l/min, "
            f"{saved.pressure_bar} bar, {saved.radius_meters} m"
        )
        return saved

    def reset_config(self) -> None:
        self.store.clear()
        logger.info("Sprinkler config cleared")

    def get_flow_summary(self, plant_count: int) -> SprinklerFlowSummary:
        """Flow figures for plant_count plants, using the defaults when no config is stored."""
        config = self.store.load() or default_sprinkler_config()
        return summarize_sprinkler_flow(config, plant_count)
