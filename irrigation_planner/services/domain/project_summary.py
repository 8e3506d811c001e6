"""
Domain service: Project summary rollup.

Combines zone statistics and main pipe statistics into a whole-project
summary with area, water and pipe totals, heuristic efficiency scores and a
linear cost estimate.

The efficiency, balance and optimization scores are heuristics for the
results page, not physically rigorous measures.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from irrigation_planner.config import settings
from irrigation_planner.domain.models import ProjectData
from irrigation_planner.domain.statistics import (
    CostEstimate,
    MainPipeDetail,
    MainPipeDetailedStats,
    PipeLengthStats,
    ProjectSummaryStats,
)
from irrigation_planner.infrastructure.sprinkler_store import SprinklerConfigStore
from irrigation_planner.services.domain.sprinkler import summarize_sprinkler_flow
from irrigation_planner.services.domain.zone_aggregator import (
    MAIN_AREA_ZONE_NAME,
    ZoneAggregator,
    all_branch_pipes,
    safe_ratio,
    summarize_pipe_lengths,
)
from irrigation_planner.utils.geometry import SQUARE_METERS_PER_RAI, calculate_geodesic_area

logger = logging.getLogger(__name__)


@dataclass
class SummaryConfig:
    """Business constants of the project summary."""

    main_pipe_cost_per_meter: float = 120.0
    """Unit cost of main pipe per meter"""

    sub_main_pipe_cost_per_meter: float = 80.0
    """Unit cost of sub-main pipe per meter"""

    branch_pipe_cost_per_meter: float = 25.0
    """Unit cost of branch pipe per meter"""

    plant_unit_cost: float = 15.0
    """Sprinkler and fitting cost per plant"""

    maintenance_medium_threshold: int = 50
    """Pipe sections above which maintenance is 'medium'"""

    maintenance_high_threshold: int = 100
    """Pipe sections above which maintenance is 'high'"""

    @classmethod
    def from_settings(cls) -> "SummaryConfig":
        return cls(
            main_pipe_cost_per_meter=settings.main_pipe_cost_per_meter,
            sub_main_pipe_cost_per_meter=settings.sub_main_pipe_cost_per_meter,
            branch_pipe_cost_per_meter=settings.branch_pipe_cost_per_meter,
            plant_unit_cost=settings.plant_unit_cost,
            maintenance_medium_threshold=settings.maintenance_medium_threshold,
            maintenance_high_threshold=settings.maintenance_high_threshold,
        )


class ProjectSummaryCalculator:
    """
    Domain service computing the whole-project summary.

    Pure apart from reading the injected sprinkler config store.
    """

    def __init__(
        self,
        config: Optional[SummaryConfig] = None,
        zone_aggregator: Optional[ZoneAggregator] = None,
        sprinkler_store: Optional[SprinklerConfigStore] = None,
    ):
        """
        Initialize the calculator.

        Args:
            config: Cost constants and thresholds (defaults from settings)
            zone_aggregator: Zone statistics service
            sprinkler_store: Optional sprinkler config source for flow figures
        """
        self.config = config or SummaryConfig.from_settings()
        self.zone_aggregator = zone_aggregator or ZoneAggregator()
        self.sprinkler_store = sprinkler_store

    def compute_main_pipe_stats(self, project: ProjectData) -> MainPipeDetailedStats:
        """
        Calculate main pipe statistics with destination zone names.

        Args:
            project: Project snapshot

        Returns:
            MainPipeDetailedStats; pipes pointing at an unknown zone are
            reported with the "main area" destination
        """
        zone_names = {zone.id: zone.name for zone in project.zones}

        details = []
        for pipe in project.main_pipes:
            name = zone_names.get(pipe.to_zone)
            if name is None:
                if pipe.to_zone and project.use_zones:
                    logger.debug(f"Main pipe {pipe.id} targets unknown zone '{pipe.to_zone}'")
                name = MAIN_AREA_ZONE_NAME
            details.append(MainPipeDetail(
                id=pipe.id,
                length=pipe.length,
                diameter=pipe.diameter,
                to_zone=pipe.to_zone,
                destination_zone_name=name,
            ))

        if not details:
            return MainPipeDetailedStats()

        total = sum(d.length for d in details)
        return MainPipeDetailedStats(
            count=len(details),
            longest=max(details, key=lambda d: d.length),
            shortest=min(details, key=lambda d: d.length),
            average_length=total / len(details),
            total_length=total,
            pipes=details,
        )

    def compute_project_summary(self, project: ProjectData) -> ProjectSummaryStats:
        """
        Calculate the whole-project summary.

        Args:
            project: Project snapshot

        Returns:
            ProjectSummaryStats
        """
        zones = self.zone_aggregator.compute_zone_stats(project)
        main_pipe_stats = self.compute_main_pipe_stats(project)

        total_area = project.total_area
        exclusion_area = sum(calculate_geodesic_area(e.coordinates) for e in project.exclusion_areas)
        effective_area = max(0.0, total_area - exclusion_area)
        usable_area_percentage = safe_ratio(effective_area, total_area) * 100

        total_plants = len(project.plants)
        total_water_need = sum(p.plant_data.water_need for p in project.plants)

        main_pipes = summarize_pipe_lengths([p.length for p in project.main_pipes])
        sub_main_pipes = summarize_pipe_lengths([p.length for p in project.sub_main_pipes])
        branch_pipes = summarize_pipe_lengths([b.length for b in all_branch_pipes(project.sub_main_pipes)])
        tiers = (main_pipes, sub_main_pipes, branch_pipes)

        total_pipe_length = sum(t.total for t in tiers)
        total_pipe_sections = sum(t.count for t in tiers)

        main_pipe_efficiency = self._main_pipe_efficiency(main_pipes)

        sprinkler_flow = None
        if self.sprinkler_store is not None:
            sprinkler_config = self.sprinkler_store.load()
            if sprinkler_config is not None:
                sprinkler_flow = summarize_sprinkler_flow(sprinkler_config, total_plants)

        summary = ProjectSummaryStats(
            project_name=project.project_name,
            total_area=total_area,
            total_area_in_rai=total_area / SQUARE_METERS_PER_RAI,
            exclusion_area=exclusion_area,
            effective_area=effective_area,
            usable_area_percentage=usable_area_percentage,
            number_of_zones=len(zones),
            total_plants=total_plants,
            total_water_need=total_water_need,
            average_water_per_plant=safe_ratio(total_water_need, total_plants),
            main_pipes=main_pipes,
            sub_main_pipes=sub_main_pipes,
            branch_pipes=branch_pipes,
            total_pipe_length=total_pipe_length,
            total_pipe_sections=total_pipe_sections,
            longest_pipes_combined=sum(t.longest for t in tiers),
            main_pipe_efficiency=main_pipe_efficiency,
            system_efficiency=(usable_area_percentage + main_pipe_efficiency) / 2,
            water_distribution_balance=self._water_distribution_balance(
                [z.total_zone_water_need for z in zones]
            ),
            pipe_optimization=self._pipe_optimization(total_pipe_length, effective_area),
            cost_estimate=self._estimate_cost(main_pipes, sub_main_pipes, branch_pipes, total_plants),
            maintenance_complexity=self._maintenance_complexity(total_pipe_sections),
            sprinkler_flow=sprinkler_flow,
            main_pipe_stats=main_pipe_stats,
            zones=zones,
        )

        logger.info(
            f"Project summary '{project.project_name}': {summary.number_of_zones} zone(s), "
            f"{total_plants} plants, {total_pipe_length:.1f}m of pipe, "
            f"maintenance {summary.maintenance_complexity}"
        )
        return summary

    @staticmethod
    def _main_pipe_efficiency(main_pipes: PipeLengthStats) -> float:
        efficiency = safe_ratio(main_pipes.longest - main_pipes.average, main_pipes.longest) * 100
        return max(0.0, efficiency)

    @staticmethod
    def _water_distribution_balance(zone_water_needs: list[float]) -> float:
        """100 minus the coefficient of variation (%) of zone water needs."""
        if len(zone_water_needs) <= 1:
            return 100.0

        values = np.asarray(zone_water_needs, dtype=float)
        mean = float(np.mean(values))
        if mean <= 0:
            return 100.0

        cv = float(np.std(values)) / mean
        return max(0.0, 100 - cv * 100)

    @staticmethod
    def _pipe_optimization(total_pipe_length: float, effective_area: float) -> float:
        if effective_area <= 0:
            return 0.0
        return max(0.0, 100 - total_pipe_length / effective_area * 10)

    def _estimate_cost(
        self,
        main_pipes: PipeLengthStats,
        sub_main_pipes: PipeLengthStats,
        branch_pipes: PipeLengthStats,
        plant_count: int,
    ) -> CostEstimate:
        main_cost = main_pipes.total * self.config.main_pipe_cost_per_meter
        sub_main_cost = sub_main_pipes.total * self.config.sub_main_pipe_cost_per_meter
        branch_cost = branch_pipes.total * self.config.branch_pipe_cost_per_meter
        plant_cost = plant_count * self.config.plant_unit_cost

        return CostEstimate(
            main_pipe_cost=main_cost,
            sub_main_pipe_cost=sub_main_cost,
            branch_pipe_cost=branch_cost,
            plant_cost=plant_cost,
            total_cost=main_cost + sub_main_cost + branch_cost + plant_cost,
        )

    def _maintenance_complexity(self, pipe_sections: int) -> str:
        if pipe_sections <= self.config.maintenance_medium_threshold:
            return "low"
        if pipe_sections <= self.config.maintenance_high_threshold:
            return "medium"
        return "high"
