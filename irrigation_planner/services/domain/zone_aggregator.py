"""
Domain service: Zone and plant aggregation.

Partitions the plants and pipes of a project into zones and computes per-zone
plant, water and pipe statistics. Zone membership of plants is derived from
their position on every call; branch pipes belong to the zone of the sub-main
that owns them.
"""
import logging
from typing import List, Optional, Sequence

import numpy as np

from irrigation_planner.domain.models import (
    BranchPipe,
    ExclusionArea,
    MainPipe,
    PlantInstance,
    PlantSpec,
    ProjectData,
    SubMainPipe,
    Zone,
)
from irrigation_planner.domain.statistics import (
    BranchPipeReport,
    LongestBranchPipe,
    PipeLengthStats,
    SubMainBranchSummary,
    ZoneDetailedStats,
)
from irrigation_planner.utils.geometry import (
    SQUARE_METERS_PER_RAI,
    calculate_geodesic_area,
    exclusion_touches_zone,
    is_point_in_polygon,
)

logger = logging.getLogger(__name__)

MAIN_AREA_ZONE_ID = "main-area"
MAIN_AREA_ZONE_NAME = "main area"


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def summarize_pipe_lengths(lengths: Sequence[float]) -> PipeLengthStats:
    """
    Calculate length statistics for one pipe tier.

    Args:
        lengths: Stored pipe lengths in meters

    Returns:
        PipeLengthStats, all zeros for an empty sequence
    """
    if len(lengths) == 0:
        return PipeLengthStats()

    values = np.asarray(lengths, dtype=float)
    return PipeLengthStats(
        longest=float(np.max(values)),
        shortest=float(np.min(values)),
        average=float(np.mean(values)),
        total=float(np.sum(values)),
        count=len(values),
    )


def all_branch_pipes(sub_main_pipes: Sequence[SubMainPipe]) -> List[BranchPipe]:
    return [branch for sub_main in sub_main_pipes for branch in sub_main.branch_pipes]


class ZoneAggregator:
    """
    Domain service computing per-zone statistics.

    Stateless: repeated calls on an unchanged project give identical results.
    """

    def compute_zone_stats(self, project: ProjectData) -> List[ZoneDetailedStats]:
        """
        Compute statistics for every zone of a project.

        When zones are not in use (or none are declared) the whole project is
        treated as a single implicit zone.

        Args:
            project: Project snapshot

        Returns:
            List of ZoneDetailedStats, one per zone
        """
        if not project.use_zones or not project.zones:
            stats = [self._single_zone_stats(project)]
        else:
            stats = [self._zone_stats(project, zone) for zone in project.zones]

        logger.info(
            f"Computed stats for {len(stats)} zone(s): "
            f"{sum(s.plant_count for s in stats)} plants"
        )
        return stats

    def compute_branch_pipe_report(self, project: ProjectData) -> BranchPipeReport:
        """
        Summarize branch pipes for the results page.

        Args:
            project: Project snapshot

        Returns:
            BranchPipeReport with the longest branch pipe and its plants, and
            the branch totals of every sub-main
        """
        branches = all_branch_pipes(project.sub_main_pipes)

        longest = None
        if branches:
            pipe = max(branches, key=lambda b: b.length)
            longest = LongestBranchPipe(
                id=pipe.id,
                length=pipe.length,
                plant_count=len(pipe.plants),
                plant_names=[plant.plant_data.name for plant in pipe.plants],
            )

        sub_mains = [
            SubMainBranchSummary(
                id=sub_main.id,
                zone_id=sub_main.zone_id,
                length=sub_main.length,
                branch_count=len(sub_main.branch_pipes),
                total_branch_length=sum(b.length for b in sub_main.branch_pipes),
            )
            for sub_main in project.sub_main_pipes
        ]

        return BranchPipeReport(longest_branch_pipe=longest, sub_main_pipes=sub_mains)

    def _single_zone_stats(self, project: ProjectData) -> ZoneDetailedStats:
        plant_data = project.plants[0].plant_data if project.plants else None
        logger.debug("Using single implicit zone for the whole project")

        return self._build_stats(
            zone_id=MAIN_AREA_ZONE_ID,
            zone_name=MAIN_AREA_ZONE_NAME,
            zone_area=project.total_area,
            plant_data=plant_data,
            plants=project.plants,
            main_pipes=project.main_pipes,
            sub_main_pipes=project.sub_main_pipes,
            exclusions=project.exclusion_areas,
        )

    def _zone_stats(self, project: ProjectData, zone: Zone) -> ZoneDetailedStats:
        plants = [p for p in project.plants if is_point_in_polygon(p.position, zone.coordinates)]
        main_pipes = [p for p in project.main_pipes if p.to_zone == zone.id]
        sub_main_pipes = [p for p in project.sub_main_pipes if p.zone_id == zone.id]
        exclusions = [e for e in project.exclusion_areas if exclusion_touches_zone(e, zone)]

        logger.debug(
            f"Zone {zone.id}: {len(plants)} plants, {len(main_pipes)} main, "
            f"{len(sub_main_pipes)} sub-main, {len(exclusions)} exclusion(s)"
        )

        return self._build_stats(
            zone_id=zone.id,
            zone_name=zone.name,
            zone_area=zone.area,
            plant_data=zone.plant_data,
            plants=plants,
            main_pipes=main_pipes,
            sub_main_pipes=sub_main_pipes,
            exclusions=exclusions,
        )

    def _build_stats(
        self,
        zone_id: str,
        zone_name: str,
        zone_area: float,
        plant_data: Optional[PlantSpec],
        plants: Sequence[PlantInstance],
        main_pipes: Sequence[MainPipe],
        sub_main_pipes: Sequence[SubMainPipe],
        exclusions: Sequence[ExclusionArea],
    ) -> ZoneDetailedStats:
        plant_count = len(plants)
        total_water_need = sum(p.plant_data.water_need for p in plants)
        if plant_count > 0:
            water_per_plant = total_water_need / plant_count
        else:
            water_per_plant = plant_data.water_need if plant_data else 0.0

        exclusion_area = sum(calculate_geodesic_area(e.coordinates) for e in exclusions)
        effective_area = max(0.0, zone_area - exclusion_area)

        return ZoneDetailedStats(
            zone_id=zone_id,
            zone_name=zone_name,
            zone_area=zone_area,
            area_in_rai=zone_area / SQUARE_METERS_PER_RAI,
            exclusion_area=exclusion_area,
            effective_area=effective_area,
            plant_count=plant_count,
            plant_data=plant_data,
            total_zone_water_need=total_water_need,
            water_per_plant=water_per_plant,
            main_pipes=summarize_pipe_lengths([p.length for p in main_pipes]),
            sub_main_pipes=summarize_pipe_lengths([p.length for p in sub_main_pipes]),
            branch_pipes=summarize_pipe_lengths([b.length for b in all_branch_pipes(sub_main_pipes)]),
            plant_density_per_square_meter=safe_ratio(plant_count, effective_area),
            water_efficiency=safe_ratio(total_water_need, effective_area),
            coverage_percentage=safe_ratio(effective_area, zone_area) * 100,
        )
