"""
Application service: Orchestration layer for project statistics and pipe drawing.
"""
import logging
from typing import Dict, List, Sequence, Tuple

from irrigation_planner.domain.models import Coordinate, CurvedPath, ProjectData
from irrigation_planner.domain.statistics import (
    BranchPipeReport,
    MainPipeDetailedStats,
    ProjectSummaryStats,
    ZoneDetailedStats,
)
from irrigation_planner.services.domain.pipe_curving import CurveConfig, CurvedPipeSession
from irrigation_planner.services.domain.project_summary import ProjectSummaryCalculator
from irrigation_planner.services.domain.zone_aggregator import ZoneAggregator

logger = logging.getLogger(__name__)


class ProjectService:
    """
    Application service for project-related operations.

    Coordinates the domain services; no statistics logic here.
    """

    def __init__(
        self,
        zone_aggregator: ZoneAggregator,
        summary_calculator: ProjectSummaryCalculator,
        curve_config: CurveConfig,
    ):
        """
        Initialize the service with dependencies.

        Args:
            zone_aggregator: Per-zone statistics service
            summary_calculator: Project rollup service
            curve_config: Pipe curving configuration
        """
        self.zone_aggregator = zone_aggregator
        self.summary_calculator = summary_calculator
        self.curve_config = curve_config

    def get_zone_stats(self, project: ProjectData) -> List[ZoneDetailedStats]:
        return self.zone_aggregator.compute_zone_stats(project)

    def get_main_pipe_stats(self, project: ProjectData) -> MainPipeDetailedStats:
        return self.summary_calculator.compute_main_pipe_stats(project)

    def get_project_summary(self, project: ProjectData) -> ProjectSummaryStats:
        return self.summary_calculator.compute_project_summary(project)

    def get_branch_pipe_report(self, project: ProjectData) -> BranchPipeReport:
        return self.zone_aggregator.compute_branch_pipe_report(project)

    def curve_pipe(
        self,
        anchors: Sequence[Coordinate],
        radius_controls: Dict[int, float],
    ) -> Tuple[CurvedPath, float]:
        """
        Replay a drawn pipe through an editing session and finish it.

        Radius controls for segments that do not exist are ignored.

        Args:
            anchors: Anchor points in drawing order
            radius_controls: Curve radius in meters keyed by segment index

        Returns:
            Tuple of the curved path and its length in meters
        """
        session = CurvedPipeSession(self.curve_config)
        for anchor in anchors:
            session.add_anchor(anchor)
        for segment_index, radius in sorted(radius_controls.items()):
            session.set_segment_radius(segment_index, radius)

        return session.finish()
