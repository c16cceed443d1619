# route_analyzer.py
# Full analysis pipeline: parse → flatten → score → select → DecisionPoints.
# Never raises for malformed routing input; every failure becomes an
# empty result with a status the caller can present.

import logging
from typing import Any, Dict, List, Optional

from .candidate_selector import CandidateSelector
from .models import AnalysisResult, AnalysisStatus, DecisionPoint, ScoredStep
from .nav_config import RehearsalConfig
from .step_flattener import flatten_route, parse_directions, total_distance
from .step_scorer import StepScorer, commitment_level

logger = logging.getLogger(__name__)


NO_ROUTE_MESSAGE = "Could not find a route. Check your locations and try again."
NO_CANDIDATES_MESSAGE = (
    "No complex junctions found on this route. It looks like a straightforward drive!"
)


class RouteAnalyzer:
    """
    Converts a routing result into the ordered list of decision points.

    One instance can analyse any number of routes; it holds configuration
    only, never per-route state.

    Args:
        config: Optional RehearsalConfig; defaults to RehearsalConfig().
    """

    def __init__(self, config: Optional[RehearsalConfig] = None) -> None:
        self.config = config or RehearsalConfig()
        self.scorer = StepScorer(self.config)
        self.selector = CandidateSelector(self.config, self.scorer)

    def _to_point(self, index: int, step: ScoredStep) -> DecisionPoint:
        return DecisionPoint(
            index=index,
            order_index=step.order_index,
            leg_index=step.leg_index,
            step_index=step.step_index,
            location=step.start,
            heading=step.heading,
            instruction=step.instruction,
            junction_type=step.junction_type,
            type_label=step.junction_type.label,
            is_primary=step.is_primary,
            is_lead_in=step.is_lead_in,
            is_decision_point=step.score >= self.config.decision_score_threshold,
            commitment_level=commitment_level(step.reasons),
            score=step.score,
            reasons=step.reasons,
            distance_meters=step.distance_meters,
            distance_text=step.distance_text,
            maneuver=step.maneuver,
        )

    def analyze_route(self, result: Optional[Dict[str, Any]]) -> AnalysisResult:
        """
        Analyse the first route of a Directions-style result.

        Returns:
            AnalysisResult with status NO_ROUTE, NO_CANDIDATES or READY.
        """
        legs = parse_directions(result)
        if legs is None:
            logger.warning("Routing result contains no route.")
            return AnalysisResult(AnalysisStatus.NO_ROUTE, NO_ROUTE_MESSAGE)

        meters = total_distance(legs)
        steps = self.scorer.score_route(flatten_route(legs))
        selected = self.selector.select(steps, meters)

        if not selected:
            logger.info(f"No rehearsal candidates among {len(steps)} steps.")
            return AnalysisResult(
                AnalysisStatus.NO_CANDIDATES, NO_CANDIDATES_MESSAGE,
                total_distance_m=meters,
            )

        points = [self._to_point(i, step) for i, step in enumerate(selected)]
        decisions = sum(1 for pt in points if pt.is_decision_point)
        logger.info(
            f"Route analysed: {len(steps)} steps → {len(points)} points "
            f"({decisions} decision points)."
        )
        return AnalysisResult(
            AnalysisStatus.READY,
            f"{len(points)} junctions to rehearse.",
            points=points,
            total_distance_m=meters,
        )

    def analyze(self, result: Optional[Dict[str, Any]]) -> List[DecisionPoint]:
        """Decision points only; empty for no-route and no-candidate cases."""
        return self.analyze_route(result).points
