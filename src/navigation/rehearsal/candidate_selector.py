# candidate_selector.py
# Picks a bounded, geographically spaced subset of scored steps,
# adds lead-in context before each pick and trims to the hard maximum.

import dataclasses
import logging
import math
from typing import Dict, List, Optional

from .geo_utils import haversine_distance
from .models import ScoredStep
from .nav_config import RehearsalConfig
from .step_scorer import StepScorer

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class CandidateSelector:
    """
    Chooses which scored steps become decision points.

    Args:
        config: RehearsalConfig for spacing, count bounds and lead-in rules.
        scorer: StepScorer whose prepare cues decide lead-ins; defaults to
                one built from config.
    """

    def __init__(
        self,
        config: Optional[RehearsalConfig] = None,
        scorer: Optional[StepScorer] = None,
    ) -> None:
        self.config = config or RehearsalConfig()
        self._scorer = scorer or StepScorer(self.config)

    # ------------------------------------------------------------------
    # Target count
    # ------------------------------------------------------------------

    def target_count(self, total_meters: float) -> int:
        """round(km / 7) + 5, clamped to [min_points, max_points]."""
        cfg = self.config
        if not total_meters or total_meters <= 0:
            return cfg.default_target
        target = _round_half_up(total_meters / 1000 / cfg.km_per_point) + cfg.base_points
        return max(cfg.min_points, min(cfg.max_points, target))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _too_close(self, candidate: ScoredStep, accepted: List[ScoredStep]) -> bool:
        for existing in accepted:
            dist = haversine_distance(
                candidate.start.lat, candidate.start.lon,
                existing.start.lat, existing.start.lon,
            )
            if dist < self.config.spacing_m:
                return True
        return False

    def _lead_in_for(self, step: ScoredStep, steps: List[ScoredStep]) -> Optional[ScoredStep]:
        if step.order_index == 0 or step.order_index > len(steps):
            return None
        prev = steps[step.order_index - 1]
        if prev.start is None:
            return None
        if prev.distance_meters > self.config.lead_in_min_distance_m or self._scorer.is_prepare(prev):
            return prev
        return None

    def _trim(self, points: List[ScoredStep]) -> List[ScoredStep]:
        """Drop lowest-scoring lead-ins first, then lowest-scoring main points."""
        limit = self.config.max_points
        result = list(points)
        for lead_ins in (True, False):
            if len(result) <= limit:
                break
            # stable sort keeps route order among equal scores
            removable = sorted(
                (pt for pt in result if pt.is_lead_in == lead_ins),
                key=lambda pt: pt.score,
            )
            for victim in removable:
                if len(result) <= limit:
                    break
                result.remove(victim)
        return sorted(result, key=lambda pt: pt.order_index)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select(self, steps: List[ScoredStep], total_meters: float) -> List[ScoredStep]:
        """
        Args:
            steps:        Full scored route, indexed by order_index.
            total_meters: Sum of leg distances.

        Returns:
            Selected steps in route order; empty when nothing qualifies.
        """
        target = self.target_count(total_meters)
        candidates = [s for s in steps if s.score > 0 and not s.exclude]
        ranked = sorted(candidates, key=lambda s: (-s.score, s.order_index))

        main: List[ScoredStep] = []
        for candidate in ranked:
            if len(main) >= target:
                break
            if self._too_close(candidate, main):
                continue
            main.append(candidate)

        selected: Dict[int, ScoredStep] = {s.order_index: s for s in main}
        for step in main:
            lead_in = self._lead_in_for(step, steps)
            if lead_in is None or lead_in.order_index in selected:
                continue
            selected[lead_in.order_index] = dataclasses.replace(
                lead_in,
                is_lead_in=True,
                reasons=lead_in.reasons + ("lead-in",),
            )

        result = sorted(selected.values(), key=lambda s: s.order_index)
        if len(result) > self.config.max_points:
            result = self._trim(result)

        logger.info(
            f"Selected {len(result)} points ({len(main)} before lead-ins) "
            f"from {len(candidates)} candidates, target {target}."
        )
        return result
